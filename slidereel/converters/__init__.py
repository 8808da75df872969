from .base import BaseConverter, StaticConverter, find_soffice
from .libreoffice import LibreOfficeConverter
from .pdf_pages import PdfPageConverter

__all__ = [
    "BaseConverter",
    "StaticConverter",
    "LibreOfficeConverter",
    "PdfPageConverter",
    "find_soffice",
]
