"""Pydantic models for extraction configuration.

The configuration is optional everywhere: every public entry point falls
back to `ExtractionConfig()` defaults. It can be persisted as YAML.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class RenderConfig(BaseModel):
    """Canvas, scaling, typography and palette for synthetic slides."""

    width: int = Field(default=1920, gt=0, description="Canvas width in pixels")
    height: int = Field(default=1080, gt=0, description="Canvas height in pixels")
    slide_width_emu: int = Field(
        default=9144000, gt=0, description="Assumed slide width (10in) in EMU"
    )
    slide_height_emu: int = Field(
        default=6858000, gt=0, description="Assumed slide height (7.5in) in EMU"
    )
    margin: int = Field(default=100, ge=0, description="Safety margin in pixels")

    font_path: Optional[str] = Field(
        default=None,
        description="TrueType font for regular text. Falls back to DejaVuSans, then Pillow's default.",
    )
    bold_font_path: Optional[str] = Field(
        default=None,
        description="TrueType font for bold text. Falls back to font_path.",
    )

    text_color: str = "#1e293b"
    muted_color: str = "#64748b"
    faint_color: str = "#94a3b8"
    border_color: str = "#e2e8f0"
    placeholder_background: str = "#ffffff"
    placeholder_background_end: str = "#f8fafc"
    lighten_factor: float = Field(default=0.1, ge=0, le=1)


class ConverterConfig(BaseModel):
    """Settings for the LibreOffice-backed converters."""

    soffice: Optional[str] = Field(
        default=None, description="Path to soffice/libreoffice. Looked up on PATH when unset."
    )
    timeout: float = Field(default=120.0, gt=0, description="Per-command timeout in seconds")
    density: int = Field(default=150, gt=0, description="Rasterization DPI")


class ExtractionConfig(BaseModel):
    """Top-level configuration for the slide extraction pipeline."""

    default_duration: float = Field(default=10.0, gt=0, description="Seconds per slide")
    render: RenderConfig = Field(default_factory=RenderConfig)
    converter: ConverterConfig = Field(default_factory=ConverterConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ExtractionConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        data = self.model_dump(exclude_none=True)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
