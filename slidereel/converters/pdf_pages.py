"""Deck conversion through PDF, with page rendering by pdfplumber.

LibreOffice renders the deck to PDF; pdfplumber then rasterizes every page
and extracts its text, so each image comes with the page's own text.
"""

import io
import logging
import tempfile
from pathlib import Path

from slidereel.converters.base import LibreOfficeBackedConverter, convert_to_pdf
from slidereel.errors import ConversionError
from slidereel.schemas.slide_schema import ConversionResult
from slidereel.utils.file_utils import to_data_uri

logger = logging.getLogger(__name__)


class PdfPageConverter(LibreOfficeBackedConverter):
    """LibreOffice PDF export plus per-page rendering with pdfplumber."""

    name = "pdf"

    def convert(self, data: bytes) -> ConversionResult:
        soffice = self._resolve_soffice()
        if not soffice:
            logger.warning("LibreOffice (soffice) not found; PDF conversion unavailable")
            return ConversionResult.unavailable(self.name)

        with tempfile.TemporaryDirectory(prefix="slidereel_") as tmpdir:
            tmp_path = Path(tmpdir)
            pptx_path = tmp_path / "presentation.pptx"
            pptx_path.write_bytes(data)
            try:
                pdf_path = convert_to_pdf(soffice, pptx_path, tmp_path, self.timeout)
            except ConversionError as e:
                logger.warning(f"PDF conversion failed: {e}")
                return ConversionResult.unavailable(self.name)
            return self.convert_pdf(pdf_path)

    def convert_pdf(self, pdf_path: str | Path) -> ConversionResult:
        """Render each page of an existing PDF and extract its text."""
        import pdfplumber

        images: list[str] = []
        texts: list[str] = []
        with pdfplumber.open(str(pdf_path)) as pdf:
            for i, page in enumerate(pdf.pages):
                page_image = page.to_image(resolution=self.density)
                buffer = io.BytesIO()
                page_image.original.save(buffer, format="PNG")
                images.append(to_data_uri(buffer.getvalue(), "image/png"))

                text = " ".join((page.extract_text() or "").split())
                texts.append(text)
                logger.debug(f"Rendered PDF page {i + 1}: {text[:100]}")

        logger.info(f"Rendered {len(images)} PDF pages")
        if not images:
            return ConversionResult.unavailable(self.name)
        return ConversionResult(images=images, texts=texts, method=self.name)
