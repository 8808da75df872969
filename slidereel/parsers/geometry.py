"""Recover layout and style of text elements from a slide part.

Used when a slide has no usable bitmap: the recovered `SlideInfo` drives the
synthetic renderer, so a styled placeholder reflects the slide's real title,
text positions, sizes and colors.
"""

import logging

from slidereel.parsers.xml_utils import (
    NS_A,
    closest_local,
    find_local,
    iter_local,
    text_content,
)
from slidereel.schemas.slide_schema import (
    SlideGeometry,
    SlideInfo,
    SlideTextElement,
    SlideTextStyle,
)

logger = logging.getLogger(__name__)

TITLE_PLACEHOLDER_TYPES = {"title", "ctrTitle", "subTitle"}

# Run font sizes are stored in hundredths of a point
_TITLE_MIN_SIZE = 2000

DEFAULT_BACKGROUND = "#ffffff"


def extract_slide_info(root) -> SlideInfo:
    """Build a SlideInfo from a parsed slide part.

    Every non-empty DrawingML paragraph becomes a text element with the
    geometry of its enclosing shape and the style of the shape's first run
    properties. Title classification is first-match-wins: placeholder type,
    then run font size above 20pt, then being the first text-bearing
    paragraph of the slide.
    """
    info = SlideInfo(background=extract_background(root))
    first_text_paragraph = None

    for para in iter_local(root, "p", NS_A):
        text = text_content(para).strip()
        if not text:
            continue
        if first_text_paragraph is None:
            first_text_paragraph = para

        shape = closest_local(para, "sp")
        is_title = _is_title(para, shape, para is first_text_paragraph)
        element = SlideTextElement(
            text=text,
            position=extract_position(shape),
            style=extract_style(shape),
            is_title=is_title,
        )
        info.text_elements.append(element)

        if is_title:
            info.title = text
        else:
            info.content.append(text)

    if not info.title and info.text_elements:
        first = info.text_elements[0]
        first.is_title = True
        info.title = first.text
        if info.content and info.content[0] == first.text:
            info.content.pop(0)

    logger.debug(
        f"Slide info: title={info.title!r}, {len(info.text_elements)} text elements, "
        f"background={info.background}"
    )
    return info


def extract_background(root) -> str:
    """Solid background color of the slide, or white."""
    bg = find_local(root, "bg")
    if bg is None:
        return DEFAULT_BACKGROUND
    color = _solid_fill_color(bg)
    return color or DEFAULT_BACKGROUND


def extract_position(shape) -> SlideGeometry:
    """Offset and extent of a shape's transform, in EMU."""
    default = SlideGeometry()
    if shape is None:
        return default

    xfrm = find_local(shape, "xfrm")
    if xfrm is None:
        return default
    off = find_local(xfrm, "off")
    ext = find_local(xfrm, "ext")
    if off is None or ext is None:
        return default

    try:
        return SlideGeometry(
            x=int(off.get("x", default.x)),
            y=int(off.get("y", default.y)),
            width=int(ext.get("cx", default.width)),
            height=int(ext.get("cy", default.height)),
        )
    except ValueError:
        logger.debug("Non-integer transform attributes, using default geometry")
        return default


def extract_style(shape) -> SlideTextStyle:
    """Font size, color and typeface from a shape's first run properties."""
    style = SlideTextStyle()
    if shape is None:
        return style

    rpr = find_local(shape, "rPr")
    if rpr is None:
        return style

    size = _font_size_points(rpr)
    if size is not None:
        style.font_size = size

    color = _solid_fill_color(rpr)
    if color:
        style.color = color

    latin = find_local(rpr, "latin")
    typeface = latin.get("typeface") if latin is not None else None
    # "+mj-lt" / "+mn-lt" refer to theme fonts, which are not resolved here
    if typeface and not typeface.startswith("+"):
        style.font_family = typeface

    return style


def _is_title(para, shape, is_first: bool) -> bool:
    if shape is None:
        return False

    ph = find_local(shape, "ph")
    if ph is not None and ph.get("type") in TITLE_PLACEHOLDER_TYPES:
        return True

    rpr = find_local(para, "rPr")
    if rpr is not None:
        sz = rpr.get("sz")
        if sz and sz.isdigit() and int(sz) > _TITLE_MIN_SIZE:
            return True

    return is_first


def _font_size_points(rpr) -> float | None:
    sz = rpr.get("sz")
    if not sz:
        return None
    try:
        return int(sz) / 100
    except ValueError:
        return None


def _solid_fill_color(elem) -> str | None:
    """'#rrggbb' from elem//solidFill/srgbClr@val, if present."""
    solid = find_local(elem, "solidFill")
    if solid is None:
        return None
    srgb = find_local(solid, "srgbClr")
    if srgb is None:
        return None
    val = srgb.get("val")
    return f"#{val}" if val else None
