from .archive import PackageArchive
from .geometry import extract_slide_info
from .relationships import (
    ExtractionContext,
    SlideReference,
    parse_slide_order,
    parse_slide_relationships,
    resolve_slide_parts,
)
from .slide_content import (
    IMAGE_STRATEGIES,
    SlideContent,
    extract_slide_content,
    extract_slide_text,
    resolve_slide_image,
)

__all__ = [
    "PackageArchive",
    "ExtractionContext",
    "SlideReference",
    "parse_slide_order",
    "parse_slide_relationships",
    "resolve_slide_parts",
    "extract_slide_info",
    "IMAGE_STRATEGIES",
    "SlideContent",
    "extract_slide_content",
    "extract_slide_text",
    "resolve_slide_image",
]
