"""Whole-deck rasterization through LibreOffice.

Methods are tried in order, first to produce PNGs wins:

1. LibreOffice -> PDF, then poppler's `pdftoppm` per page
2. LibreOffice -> PDF, then ImageMagick `convert` per page
3. LibreOffice direct PNG export

The direct export only ever yields one image. When that single image is all
we have, the result is flagged `combined` so the orchestrator discards it.
"""

import logging
import re
import shutil
import tempfile
from pathlib import Path

from slidereel.converters.base import LibreOfficeBackedConverter, convert_to_pdf, run_command
from slidereel.errors import ConversionError
from slidereel.schemas.slide_schema import ConversionResult
from slidereel.utils.file_utils import to_data_uri

logger = logging.getLogger(__name__)

_PAGE_NUMBER = re.compile(r"(\d+)\.png$", re.IGNORECASE)


class LibreOfficeConverter(LibreOfficeBackedConverter):
    """Rasterize every slide to PNG using LibreOffice and a PDF rasterizer."""

    name = "libreoffice"

    def convert(self, data: bytes) -> ConversionResult:
        soffice = self._resolve_soffice()
        if not soffice:
            logger.warning("LibreOffice (soffice) not found; high-fidelity conversion unavailable")
            return ConversionResult.unavailable(self.name)

        with tempfile.TemporaryDirectory(prefix="slidereel_") as tmpdir:
            tmp_path = Path(tmpdir)
            pptx_path = tmp_path / "presentation.pptx"
            pptx_path.write_bytes(data)
            images_dir = tmp_path / "images"
            images_dir.mkdir()

            pngs, method = self._rasterize(soffice, pptx_path, images_dir)
            if not pngs:
                logger.warning("All LibreOffice conversion methods failed")
                return ConversionResult.unavailable(self.name)

            images = [to_data_uri(png.read_bytes(), "image/png") for png in pngs]

        combined = method == "png" and len(images) == 1
        if combined:
            logger.info("Direct PNG export produced a single image; flagging as combined")
        logger.info(f"LibreOffice conversion ({method}) produced {len(images)} images")
        return ConversionResult(images=images, combined=combined, method=f"{self.name}:{method}")

    def _rasterize(self, soffice: str, pptx_path: Path, images_dir: Path) -> tuple[list[Path], str]:
        pdf_path = None
        try:
            pdf_path = convert_to_pdf(soffice, pptx_path, pptx_path.parent, self.timeout)
        except ConversionError as e:
            logger.warning(f"PDF conversion failed: {e}")

        if pdf_path is not None:
            for method, rasterize in (
                ("pdftoppm", self._pdftoppm),
                ("imagemagick", self._imagemagick),
            ):
                try:
                    rasterize(pdf_path, images_dir)
                except ConversionError as e:
                    logger.warning(f"{method} rasterization failed: {e}")
                    _clear(images_dir)
                    continue
                pngs = collect_pngs(images_dir)
                if pngs:
                    return pngs, method

        try:
            run_command(
                [soffice, "--headless", "--convert-to", "png", "--outdir", str(images_dir), str(pptx_path)],
                self.timeout,
            )
        except ConversionError as e:
            logger.warning(f"Direct PNG export failed: {e}")
            return [], ""
        return collect_pngs(images_dir), "png"

    def _pdftoppm(self, pdf_path: Path, images_dir: Path) -> None:
        if not shutil.which("pdftoppm"):
            raise ConversionError("pdftoppm not found")
        run_command(
            ["pdftoppm", "-png", "-r", str(self.density), str(pdf_path), str(images_dir / "slide")],
            self.timeout,
        )

    def _imagemagick(self, pdf_path: Path, images_dir: Path) -> None:
        if not shutil.which("convert"):
            raise ConversionError("ImageMagick convert not found")
        run_command(
            ["convert", "-density", str(self.density), str(pdf_path), str(images_dir / "slide_%d.png")],
            self.timeout,
        )


def collect_pngs(directory: Path) -> list[Path]:
    """PNG files in page order.

    Rasterizers number pages with or without zero padding (slide-1.png,
    slide-01.png, slide_0.png), so sort on the trailing integer.
    """
    def page_key(path: Path) -> tuple[int, str]:
        match = _PAGE_NUMBER.search(path.name)
        return (int(match.group(1)) if match else -1, path.name)

    return sorted((p for p in directory.iterdir() if p.suffix.lower() == ".png"), key=page_key)


def _clear(directory: Path) -> None:
    for path in directory.iterdir():
        if path.is_file():
            path.unlink()
