from .slide_schema import (
    ConversionResult,
    SlideGeometry,
    SlideInfo,
    SlideRecord,
    SlideTextElement,
    SlideTextStyle,
)
from .config import ConverterConfig, ExtractionConfig, RenderConfig

__all__ = [
    "ConversionResult",
    "SlideGeometry",
    "SlideInfo",
    "SlideRecord",
    "SlideTextElement",
    "SlideTextStyle",
    "ConverterConfig",
    "ExtractionConfig",
    "RenderConfig",
]
