"""Converter interface and shared LibreOffice helpers.

A converter rasterizes a whole deck at high fidelity. It answers with either
an ordered list of per-slide images or an explicit "unavailable" result;
the orchestrator falls back to direct package parsing on the latter.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from slidereel.errors import ConversionError
from slidereel.schemas.config import ConverterConfig
from slidereel.schemas.slide_schema import ConversionResult

logger = logging.getLogger(__name__)

_SOFFICE_CANDIDATES = [
    "soffice",
    "libreoffice",
    "/Applications/LibreOffice.app/Contents/MacOS/soffice",
    "/usr/bin/soffice",
    "/usr/local/bin/soffice",
]


class BaseConverter(ABC):
    """Abstract base for whole-deck slide image converters."""

    name = "converter"

    @abstractmethod
    def convert(self, data: bytes) -> ConversionResult:
        """Rasterize the deck in `data`.

        Implementations return `ConversionResult.unavailable()` rather than
        raising when their backend is missing or fails.
        """
        ...


class StaticConverter(BaseConverter):
    """Converter that returns images it was given up front.

    Useful for callers that already hold rasterized slides, and in tests.
    """

    name = "static"

    def __init__(self, images: list[str] | None = None, texts: list[str] | None = None,
                 combined: bool = False):
        self.images = list(images or [])
        self.texts = list(texts or [])
        self.combined = combined

    def convert(self, data: bytes) -> ConversionResult:
        if not self.images:
            return ConversionResult.unavailable(self.name)
        return ConversionResult(
            images=self.images,
            texts=self.texts,
            combined=self.combined,
            method=self.name,
        )


class LibreOfficeBackedConverter(BaseConverter):
    """Shared setup for converters that shell out to LibreOffice."""

    def __init__(self, soffice: str | None = None, timeout: float = 120.0, density: int = 150):
        self.soffice = soffice
        self.timeout = timeout
        self.density = density

    @classmethod
    def from_config(cls, config: ConverterConfig) -> "LibreOfficeBackedConverter":
        return cls(soffice=config.soffice, timeout=config.timeout, density=config.density)

    def _resolve_soffice(self) -> str | None:
        if self.soffice:
            return self.soffice if shutil.which(self.soffice) else None
        return find_soffice()


def find_soffice() -> str | None:
    """Find the LibreOffice soffice binary."""
    for candidate in _SOFFICE_CANDIDATES:
        if shutil.which(candidate):
            return candidate
    return None


def run_command(args: list[str], timeout: float) -> subprocess.CompletedProcess:
    """Run an external tool, raising ConversionError on any failure."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise ConversionError(f"{args[0]} timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise ConversionError(f"{args[0]} not found") from e
    if result.returncode != 0:
        raise ConversionError(
            f"{args[0]} exited with {result.returncode}: {result.stderr[:200]}"
        )
    return result


def convert_to_pdf(soffice: str, pptx_path: Path, outdir: Path, timeout: float) -> Path:
    """Convert a deck to PDF with LibreOffice headless; return the PDF path."""
    run_command(
        [soffice, "--headless", "--convert-to", "pdf", "--outdir", str(outdir), str(pptx_path)],
        timeout,
    )
    pdf_path = outdir / f"{pptx_path.stem}.pdf"
    if not pdf_path.exists():
        raise ConversionError(f"LibreOffice produced no PDF for {pptx_path.name}")
    logger.info(f"Converted {pptx_path.name} to PDF")
    return pdf_path
