"""Synthetic slide rendering with Pillow.

When no real bitmap can be recovered for a slide, a placeholder image is
drawn instead. Two layouts exist:

* `render_slide_info` draws a styled slide from recovered structure
  (background, title, positioned and wrapped text elements).
* `render_text_slide` draws a minimal slide from plain text only.

Both are pure functions: the canvas is created, drawn, encoded as a PNG data
URI and discarded within the call. Output is deterministic for equal input.
"""

import io
import logging
from functools import lru_cache

from PIL import Image, ImageColor, ImageDraw, ImageFont

from slidereel.errors import RenderError
from slidereel.schemas.config import RenderConfig
from slidereel.schemas.slide_schema import SlideInfo
from slidereel.utils.file_utils import to_data_uri

logger = logging.getLogger(__name__)

_FALLBACK_REGULAR = "DejaVuSans.ttf"
_FALLBACK_BOLD = "DejaVuSans-Bold.ttf"

# Layout constants for the 1920x1080 reference canvas
_HEADER_Y = 60
_DIVIDER_Y = 90
_TITLE_Y = 160
_CONTENT_TOP = 200
_FOOTER_OFFSET = 50
_LINE_SPACING = 1.4

_TEXT_HEADER_Y = 80
_TEXT_DIVIDER_Y = 120
_TEXT_TOP = 180
_TEXT_LINE_HEIGHT = 36


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_slide_info(
    info: SlideInfo,
    slide_number: int,
    config: RenderConfig | None = None,
) -> str:
    """Render a styled placeholder slide from recovered structure.

    Text element positions are scaled from EMU to canvas pixels and clamped
    inside the safety margin; each element is word-wrapped to its declared
    width.
    """
    config = config or RenderConfig()
    width, height, margin = config.width, config.height, config.margin

    image = _new_canvas(config)
    draw = ImageDraw.Draw(image)

    top = _rgb(info.background, "#ffffff")
    bottom = _rgb(lighten_color(info.background, config.lighten_factor), "#ffffff")
    _fill_vertical_gradient(draw, width, height, top, bottom)
    _draw_chrome(draw, slide_number, config, header_y=_HEADER_Y, divider_y=_DIVIDER_Y)

    if info.title:
        _draw_text(
            draw, (width / 2, _TITLE_Y), info.title,
            _font(48, bold=True, config=config), _rgb(config.text_color), align="center",
        )

    for element in info.text_elements:
        # Titles are drawn once, in the header band
        if element.is_title and info.title:
            continue

        font_size = max(1, round(element.style.font_size))
        font = _font(font_size, config=config, family=element.style.font_family)
        fill = _rgb(element.style.color, config.text_color)

        pos = element.position
        x = pos.x / config.slide_width_emu * width
        y = pos.y / config.slide_height_emu * height
        max_width = pos.width / config.slide_width_emu * width

        x = max(margin, min(x, width - margin))
        y = max(_CONTENT_TOP, min(y, height - margin))
        max_width = min(max_width, width - x - margin)

        line_height = font_size * _LINE_SPACING
        for i, line in enumerate(wrap_text(draw, element.text, font, max_width)):
            line_y = y + i * line_height
            if line_y >= height - margin:
                break
            _draw_text(draw, (x, line_y), line, font, fill)

    _draw_footer(draw, slide_number, config)
    return _encode(image)


def render_text_slide(
    text: str,
    slide_number: int,
    config: RenderConfig | None = None,
) -> str:
    """Render a minimal placeholder slide from plain text.

    Text flows as left-aligned wrapped paragraphs below the header and is
    cut with an ellipsis when it would overflow the canvas. Without text a
    muted placeholder message is centered instead.
    """
    config = config or RenderConfig()
    width, height, margin = config.width, config.height, config.margin

    image = _new_canvas(config)
    draw = ImageDraw.Draw(image)

    _fill_vertical_gradient(
        draw, width, height,
        _rgb(config.placeholder_background), _rgb(config.placeholder_background_end),
    )
    _draw_chrome(draw, slide_number, config, header_y=_TEXT_HEADER_Y, divider_y=_TEXT_DIVIDER_Y)

    paragraphs = [p.strip() for p in (text or "").split("\n") if p.strip()]
    if paragraphs:
        font = _font(28, config=config)
        fill = _rgb(config.text_color)
        max_width = width - 2 * margin
        max_lines = (height - _TEXT_TOP - margin) // _TEXT_LINE_HEIGHT
        total_lines = 0
        truncated = False

        for paragraph in paragraphs:
            if total_lines >= max_lines:
                truncated = True
                break
            for line in wrap_text(draw, paragraph, font, max_width):
                if total_lines >= max_lines:
                    truncated = True
                    break
                _draw_text(draw, (margin, _TEXT_TOP + total_lines * _TEXT_LINE_HEIGHT), line, font, fill)
                total_lines += 1
            # Blank line between paragraphs
            total_lines += 1

        if truncated:
            _draw_text(
                draw, (margin, _TEXT_TOP + min(total_lines, max_lines) * _TEXT_LINE_HEIGHT), "...",
                _font(24, config=config), _rgb(config.muted_color),
            )
    else:
        _draw_text(
            draw, (width / 2, height / 2), "No content available",
            _font(24, config=config), _rgb(config.faint_color), align="center",
        )

    _draw_footer(draw, slide_number, config)
    return _encode(image)


def lighten_color(color: str, factor: float) -> str:
    """Move each RGB channel `factor` of the way toward 255.

    Colors that cannot be parsed are returned unchanged.
    """
    try:
        r, g, b = ImageColor.getrgb(color)[:3]
    except ValueError:
        return color
    r, g, b = (min(255, c + int((255 - c) * factor)) for c in (r, g, b))
    return f"#{r:02x}{g:02x}{b:02x}"


def wrap_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: float) -> list[str]:
    """Greedy word wrap using the font's rendered width.

    A single word wider than `max_width` is kept on its own line.
    """
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if current and draw.textlength(candidate, font=font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


# ---------------------------------------------------------------------------
# Drawing helpers
# ---------------------------------------------------------------------------


def _new_canvas(config: RenderConfig) -> Image.Image:
    try:
        return Image.new("RGB", (config.width, config.height), "#ffffff")
    except (ValueError, MemoryError, OSError) as e:
        raise RenderError(
            f"Could not allocate {config.width}x{config.height} canvas: {e}"
        ) from e


def _fill_vertical_gradient(draw, width: int, height: int, top: tuple, bottom: tuple) -> None:
    span = max(1, height - 1)
    for row in range(height):
        t = row / span
        color = tuple(round(a + (b - a) * t) for a, b in zip(top, bottom))
        draw.line([(0, row), (width, row)], fill=color)


def _draw_chrome(draw, slide_number: int, config: RenderConfig, header_y: int, divider_y: int) -> None:
    """Border, centered slide label and divider."""
    width, height, margin = config.width, config.height, config.margin
    border = _rgb(config.border_color)
    draw.rectangle([0, 0, width - 1, height - 1], outline=border, width=2)
    _draw_text(
        draw, (width / 2, header_y), f"Slide {slide_number}",
        _font(36, bold=True, config=config), _rgb(config.muted_color), align="center",
    )
    draw.line([(margin, divider_y), (width - margin, divider_y)], fill=border, width=1)


def _draw_footer(draw, slide_number: int, config: RenderConfig) -> None:
    _draw_text(
        draw, (config.width - config.margin, config.height - _FOOTER_OFFSET), f"Slide {slide_number}",
        _font(16, config=config), _rgb(config.faint_color), align="right",
    )


def _draw_text(draw, xy: tuple[float, float], text: str, font, fill, align: str = "left") -> None:
    """Draw text with `xy` on the baseline, aligned horizontally at x."""
    x, y = xy
    if align != "left":
        length = draw.textlength(text, font=font)
        x -= length / 2 if align == "center" else length
    if isinstance(font, ImageFont.FreeTypeFont):
        draw.text((x, y), text, font=font, fill=fill, anchor="ls")
    else:
        # Bitmap fonts only support top-left anchoring
        draw.text((x, y - font.getbbox(text)[3]), text, font=font, fill=fill)


def _encode(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return to_data_uri(buffer.getvalue(), "image/png")


def _rgb(color: str, fallback: str = "#1e293b") -> tuple[int, int, int]:
    try:
        return ImageColor.getrgb(color)[:3]
    except ValueError:
        logger.debug(f"Unparseable color {color!r}, using {fallback}")
        return ImageColor.getrgb(fallback)[:3]


def _font(size: int, bold: bool = False, config: RenderConfig | None = None, family: str | None = None):
    config = config or RenderConfig()
    path = (config.bold_font_path or config.font_path) if bold else config.font_path
    return _load_font(path, family, size, bold)


@lru_cache(maxsize=128)
def _load_font(path: str | None, family: str | None, size: int, bold: bool):
    """Resolve a font: configured file, slide typeface, DejaVu, Pillow default."""
    candidates = []
    if path:
        candidates.append(path)
    if family:
        candidates.append(f"{family}.ttf")
    candidates.append(_FALLBACK_BOLD if bold else _FALLBACK_REGULAR)

    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.debug(f"No TrueType font found for size {size}, using Pillow default")
    return ImageFont.load_default(size=size)
