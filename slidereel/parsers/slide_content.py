"""Extract text and an image for one slide part.

Text is the flat concatenation of every text run on the slide. The image is
found through an ordered cascade of strategies; the first strategy to return
a data URI wins:

1. a media entry whose file name carries the slide number
2. any image under the slide-scoped media folder
3. a synthetic render from the slide's parsed geometry
4. a conventional thumbnail path

If the whole cascade comes up empty, a minimal text-only placeholder is
rendered so every extracted slide carries an image.
"""

import logging
import posixpath
import re
from dataclasses import dataclass
from typing import Callable, Optional

from lxml import etree

from slidereel.errors import PackagePartError, RenderError
from slidereel.parsers.geometry import extract_slide_info
from slidereel.parsers.relationships import ExtractionContext
from slidereel.parsers.xml_utils import iter_local, parse_xml, text_content
from slidereel.render.slide_renderer import render_slide_info, render_text_slide
from slidereel.utils.file_utils import is_image_name, mime_type_for, to_data_uri

logger = logging.getLogger(__name__)

MEDIA_DIR = "ppt/media/"
SLIDE_MEDIA_DIR = "ppt/slides/media/"


@dataclass(frozen=True)
class SlideSource:
    """A parsed slide part awaiting image resolution."""

    part_path: str
    slide_number: int
    root: etree._Element


@dataclass(frozen=True)
class SlideContent:
    text: str
    image_url: str


ImageStrategy = Callable[[ExtractionContext, SlideSource], Optional[str]]


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def extract_slide_text(root) -> str:
    """All text runs in document order, trimmed, empties dropped, space-joined."""
    runs = (text_content(t).strip() for t in iter_local(root, "t"))
    return " ".join(run for run in runs if run)


# ---------------------------------------------------------------------------
# Image strategies
# ---------------------------------------------------------------------------


def find_targeted_media(context: ExtractionContext, source: SlideSource) -> str | None:
    """Media image whose file name refers to this slide's number.

    Among several matches the shortest file name wins, as it is the most
    likely to be a direct per-slide export.
    """
    n = source.slide_number
    pattern = re.compile(rf"slide[-_]?{n}", re.IGNORECASE)

    def matches(name: str) -> bool:
        filename = posixpath.basename(name)
        return (
            f"slide{n}" in filename
            or f"image{n}" in filename
            or f"media{n}" in filename
            or pattern.search(filename) is not None
        )

    candidates = [
        name
        for name in _media_entries(context)
        if is_image_name(name) and matches(name)
    ]
    if not candidates:
        return None

    candidates.sort(key=lambda name: len(posixpath.basename(name)))
    chosen = candidates[0]
    logger.info(f"Slide {n}: using media {chosen}")
    return _encode_entry(context, chosen)


def find_slide_scoped_media(context: ExtractionContext, source: SlideSource) -> str | None:
    """First image found under the slide-scoped media folder."""
    for name in context.archive.list_entries(SLIDE_MEDIA_DIR):
        if is_image_name(name):
            logger.info(f"Slide {source.slide_number}: using slide media {name}")
            return _encode_entry(context, name)
    return None


def render_from_geometry(context: ExtractionContext, source: SlideSource) -> str | None:
    """Styled placeholder from the slide's recovered layout."""
    info = extract_slide_info(source.root)
    return render_slide_info(info, source.slide_number, context.config.render)


def find_known_thumbnail(context: ExtractionContext, source: SlideSource) -> str | None:
    """Exact conventional thumbnail paths for this slide."""
    n = source.slide_number
    for path in (
        f"{MEDIA_DIR}slide{n}.png",
        f"{MEDIA_DIR}slide{n}.jpg",
        f"{SLIDE_MEDIA_DIR}slide{n}.png",
        f"{SLIDE_MEDIA_DIR}slide{n}.jpg",
    ):
        if context.archive.has_entry(path):
            logger.info(f"Slide {n}: using thumbnail {path}")
            return _encode_entry(context, path)
    return None


IMAGE_STRATEGIES: tuple[ImageStrategy, ...] = (
    find_targeted_media,
    find_slide_scoped_media,
    render_from_geometry,
    find_known_thumbnail,
)


def resolve_slide_image(
    context: ExtractionContext,
    source: SlideSource,
    strategies: tuple[ImageStrategy, ...] = IMAGE_STRATEGIES,
) -> str | None:
    """Run the image strategies in order and return the first result.

    A strategy that raises counts as a miss for that strategy only.
    """
    for strategy in strategies:
        try:
            image_url = strategy(context, source)
        except Exception as e:
            logger.warning(f"Slide {source.slide_number}: {strategy.__name__} failed: {e}")
            continue
        if image_url:
            return image_url
        logger.debug(f"Slide {source.slide_number}: {strategy.__name__} found nothing")
    return None


# ---------------------------------------------------------------------------
# Per-slide entry point
# ---------------------------------------------------------------------------


def extract_slide_content(
    context: ExtractionContext,
    part_path: str,
    slide_number: int,
    strategies: tuple[ImageStrategy, ...] = IMAGE_STRATEGIES,
) -> SlideContent | None:
    """Text and image for one slide, or None when the slide must be skipped.

    Skipped when the part is missing, cannot be read back from the archive,
    its XML does not parse, or even the minimal placeholder cannot be
    rendered.
    """
    archive = context.archive
    if not archive.has_entry(part_path):
        logger.warning(f"Slide {slide_number}: part {part_path} not found, skipping")
        return None

    try:
        root = parse_xml(archive.read_binary(part_path))
    except (etree.XMLSyntaxError, PackagePartError) as e:
        logger.warning(f"Slide {slide_number}: could not parse {part_path}: {e}")
        return None

    text = extract_slide_text(root)
    source = SlideSource(part_path=part_path, slide_number=slide_number, root=root)
    image_url = resolve_slide_image(context, source, strategies)

    if not image_url:
        logger.info(f"Slide {slide_number}: no image found, rendering text placeholder")
        try:
            image_url = render_text_slide(text, slide_number, context.config.render)
        except RenderError as e:
            logger.warning(f"Slide {slide_number}: placeholder rendering failed: {e}")
            return None

    return SlideContent(text=text, image_url=image_url)


def _media_entries(context: ExtractionContext) -> list[str]:
    archive = context.archive
    return archive.list_entries(MEDIA_DIR) + archive.list_entries(SLIDE_MEDIA_DIR)


def _encode_entry(context: ExtractionContext, name: str) -> str:
    return to_data_uri(context.archive.read_binary(name), mime_type_for(name))
