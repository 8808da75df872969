"""Top-level slide extraction: an ordered cascade of strategies.

1. High-fidelity conversion through an optional converter. Its images are
   kept and paired by position with text recovered by direct parsing.
2. Direct package parsing (archive -> relationships -> slide content).

Each strategy runs at most once, in order, until one yields slides. A
package that cannot be opened, or no slides at all, surfaces as a single
PresentationParseError.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from slidereel.converters.base import BaseConverter
from slidereel.errors import (
    InvalidPackage,
    InvalidPackageStructure,
    PackagePartError,
    PresentationParseError,
)
from slidereel.parsers.archive import PackageArchive
from slidereel.parsers.relationships import ExtractionContext
from slidereel.parsers.slide_content import extract_slide_content
from slidereel.schemas.config import ExtractionConfig
from slidereel.schemas.slide_schema import ConversionResult, SlideRecord
from slidereel.timing import assign_default_timing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionJob:
    """Input shared by every strategy of one extraction call."""

    data: bytes
    config: ExtractionConfig
    converter: Optional[BaseConverter] = None


Strategy = Callable[[ExtractionJob], Optional[list[SlideRecord]]]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def convert_with_service(job: ExtractionJob) -> list[SlideRecord] | None:
    """Rasterize with the converter, then adopt text from direct parsing.

    Returns None when no converter is configured, the converter is
    unavailable or fails, or it returned one combined image for the deck.
    """
    if job.converter is None:
        logger.info("No converter configured, skipping high-fidelity conversion")
        return None

    name = job.converter.name
    try:
        result = job.converter.convert(job.data)
    except Exception as e:
        logger.warning(f"Converter '{name}' failed: {e}")
        return None

    if not result.usable:
        logger.info(
            f"Converter '{name}' result not usable (available={result.available}, "
            f"combined={result.combined}, images={len(result.images)}), falling back"
        )
        return None

    logger.info(f"Converter '{name}' produced {len(result.images)} slides; parsing text")
    text_slides = parse_package(job)
    return combine_image_and_text_slides(result, text_slides, job.config.default_duration)


def parse_package(job: ExtractionJob) -> list[SlideRecord]:
    """Direct parsing of the package, one record per resolvable slide.

    Raises InvalidPackage / InvalidPackageStructure for packages that cannot
    be read at all; per-slide failures only drop that slide.
    """
    records: list[SlideRecord] = []
    with PackageArchive(job.data) as archive:
        context = ExtractionContext.build(archive, job.config)
        for ref in context.slide_references():
            content = extract_slide_content(context, ref.part_path, ref.slide_number)
            if content is None:
                logger.warning(f"Slide {ref.slide_number}: extraction failed, dropped")
                continue
            records.append(
                SlideRecord.for_slide(
                    ref.slide_number,
                    content.image_url,
                    text=content.text,
                    duration=job.config.default_duration,
                )
            )
    logger.info(f"Direct parsing extracted {len(records)} slides")
    return records


STRATEGIES: tuple[Strategy, ...] = (convert_with_service, parse_package)


def combine_image_and_text_slides(
    result: ConversionResult,
    text_slides: list[SlideRecord],
    duration: float = 10.0,
) -> list[SlideRecord]:
    """Pair converter images with parsed text by position.

    Slide i keeps the converter's image and adopts text_slides[i].text when
    it exists, otherwise the converter's own page text (or "").
    """
    combined: list[SlideRecord] = []
    for index, image_url in enumerate(result.images):
        if index < len(text_slides):
            text = text_slides[index].text
        elif index < len(result.texts):
            text = result.texts[index]
        else:
            text = ""
        combined.append(SlideRecord.for_slide(index + 1, image_url, text=text, duration=duration))
    return combined


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_slides(
    data: bytes,
    converter: BaseConverter | None = None,
    config: ExtractionConfig | None = None,
    strategies: tuple[Strategy, ...] = STRATEGIES,
) -> list[SlideRecord]:
    """Turn .pptx bytes into an ordered, timed list of slide records.

    Raises:
        PresentationParseError: the package is not a readable presentation,
            or no strategy produced any slide.
    """
    config = config or ExtractionConfig()
    job = ExtractionJob(data=data, config=config, converter=converter)
    logger.info(f"Extracting slides from {len(data)} bytes")

    for strategy in strategies:
        try:
            slides = strategy(job)
        except (InvalidPackage, InvalidPackageStructure, PackagePartError) as e:
            logger.error(f"Invalid presentation package: {e}")
            raise PresentationParseError() from e

        if slides:
            logger.info(f"Strategy '{strategy.__name__}' produced {len(slides)} slides")
            return assign_default_timing(slides, config.default_duration)
        logger.info(f"Strategy '{strategy.__name__}' produced no slides")

    logger.error("No strategy produced any slides")
    raise PresentationParseError()


def extract_slides_from_file(
    path: str | Path,
    converter: BaseConverter | None = None,
    config: ExtractionConfig | None = None,
) -> list[SlideRecord]:
    """Convenience wrapper over extract_slides for a .pptx file on disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() != ".pptx":
        raise ValueError(f"Expected a .pptx file, got: {path.suffix}")
    return extract_slides(path.read_bytes(), converter=converter, config=config)
