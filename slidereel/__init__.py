"""Turn PowerPoint decks into timed slideshow records for narrated video."""

from .errors import (
    ConversionError,
    InvalidPackage,
    InvalidPackageStructure,
    PackagePartError,
    PresentationParseError,
    RenderError,
    SlideReelError,
)
from .pipeline import extract_slides, extract_slides_from_file
from .schemas import ExtractionConfig, SlideRecord
from .timing import assign_default_timing, sync_slides

__version__ = "0.1.0"

__all__ = [
    "extract_slides",
    "extract_slides_from_file",
    "assign_default_timing",
    "sync_slides",
    "ExtractionConfig",
    "SlideRecord",
    "SlideReelError",
    "InvalidPackage",
    "InvalidPackageStructure",
    "PackagePartError",
    "PresentationParseError",
    "RenderError",
    "ConversionError",
]
