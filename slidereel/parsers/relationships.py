"""Resolve the presentation's slide order to slide part paths.

Two parts drive this:

* `ppt/_rels/presentation.xml.rels` maps relationship ids to part targets.
* `ppt/presentation.xml` lists `sldId` elements in presentation order, each
  pointing at a relationship id.

The manifest order in `presentation.xml` is authoritative. Archive entry
order is never used for ordering.
"""

import logging
import posixpath
from dataclasses import dataclass, field

from lxml import etree

from slidereel.errors import InvalidPackageStructure, PackagePartError
from slidereel.parsers.archive import PackageArchive
from slidereel.parsers.xml_utils import (
    get_qualified_attr,
    iter_local,
    parse_xml,
)
from slidereel.schemas.config import ExtractionConfig

logger = logging.getLogger(__name__)

PRESENTATION_PART = "ppt/presentation.xml"
PRESENTATION_RELS_PART = "ppt/_rels/presentation.xml.rels"
_PRESENTATION_DIR = "ppt"


@dataclass(frozen=True)
class SlideReference:
    """A manifest entry that resolved to a slide part."""

    slide_number: int
    rid: str
    part_path: str


@dataclass
class ExtractionContext:
    """Request-scoped state for one extraction call.

    Built fresh for every file; never shared between extractions.
    """

    archive: PackageArchive
    relationships: dict[str, str] = field(default_factory=dict)
    slide_order: list[str | None] = field(default_factory=list)
    config: ExtractionConfig = field(default_factory=ExtractionConfig)

    @classmethod
    def build(
        cls,
        archive: PackageArchive,
        config: ExtractionConfig | None = None,
    ) -> "ExtractionContext":
        relationships = parse_slide_relationships(archive)
        slide_order = parse_slide_order(archive)
        return cls(
            archive=archive,
            relationships=relationships,
            slide_order=slide_order,
            config=config or ExtractionConfig(),
        )

    def slide_references(self) -> list[SlideReference]:
        return resolve_slide_references(self.slide_order, self.relationships)


def parse_slide_relationships(archive: PackageArchive) -> dict[str, str]:
    """Map relationship id -> slide part path for slide-typed relationships.

    Any relationship whose Type contains "slide" is recorded. A missing or
    malformed rels part yields an empty map.
    """
    if not archive.has_entry(PRESENTATION_RELS_PART):
        logger.warning(f"{PRESENTATION_RELS_PART} not found; no slides can be resolved")
        return {}

    try:
        root = parse_xml(archive.read_binary(PRESENTATION_RELS_PART))
    except (etree.XMLSyntaxError, PackagePartError) as e:
        logger.warning(f"Could not parse {PRESENTATION_RELS_PART}: {e}")
        return {}

    relationships: dict[str, str] = {}
    for rel in iter_local(root, "Relationship"):
        rid = rel.get("Id")
        target = rel.get("Target")
        rel_type = rel.get("Type") or ""
        if rel.get("TargetMode") == "External":
            continue
        if "slide" in rel_type and rid and target:
            relationships[rid] = resolve_target(target)

    logger.info(f"Parsed {len(relationships)} slide relationships")
    return relationships


def parse_slide_order(archive: PackageArchive) -> list[str | None]:
    """Relationship ids of the manifest's slide references, in order.

    The relationship-namespaced id is read first, then the unprefixed `id`.
    Entries without either are kept as None so manifest positions stay
    stable; a numeric `id` never matches a relationship and is skipped later.
    """
    if not archive.has_entry(PRESENTATION_PART):
        raise InvalidPackageStructure(f"{PRESENTATION_PART} not found in package")

    try:
        root = parse_xml(archive.read_binary(PRESENTATION_PART))
    except (etree.XMLSyntaxError, PackagePartError) as e:
        raise InvalidPackageStructure(f"Could not parse {PRESENTATION_PART}: {e}") from e

    order = [
        get_qualified_attr(sld_id, "id") or sld_id.get("id")
        for sld_id in iter_local(root, "sldId")
    ]
    logger.info(f"Presentation manifest declares {len(order)} slides")
    return order


def resolve_slide_references(
    slide_order: list[str | None],
    relationships: dict[str, str],
) -> list[SlideReference]:
    """Pair manifest positions with slide parts, skipping unresolved ids.

    `slide_number` is always the 1-based manifest position, so a skipped
    reference leaves a gap rather than renumbering later slides.
    """
    references: list[SlideReference] = []
    for i, rid in enumerate(slide_order):
        if rid and rid in relationships:
            references.append(SlideReference(i + 1, rid, relationships[rid]))
        else:
            logger.warning(f"Slide {i + 1}: relationship id {rid!r} not resolved, skipping")
    return references


def resolve_target(target: str) -> str:
    """Resolve a relationship target against the presentation part's folder.

    'slides/slide1.xml' -> 'ppt/slides/slide1.xml'
    '/ppt/slides/slide1.xml' -> 'ppt/slides/slide1.xml'
    """
    if target.startswith("/"):
        return posixpath.normpath(target.lstrip("/"))
    return posixpath.normpath(posixpath.join(_PRESENTATION_DIR, target))


def resolve_slide_parts(archive: PackageArchive) -> list[SlideReference]:
    """Slide parts of a package in manifest order, unresolved ids skipped."""
    return ExtractionContext.build(archive).slide_references()
