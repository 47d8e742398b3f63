"""Book importer implementations and contracts."""

from __future__ import annotations

import logging

from lectern.extraction.engine import EPUBExtractor

from .base import BookImporter
from .calibre_importer import CalibreEBookImporter
from .config import ImportSettings
from .epub_importer import EPUBImporter
from .models import Book, BookFormat
from .service import BatchImportResult, BookImportService
from .txt_importer import TXTImporter

logger = logging.getLogger(__name__)

try:
    from .pdf_importer import PDFImporter
except ImportError:
    PDFImporter = None
    logger.warning("PDF support unavailable: install 'pymupdf'")


def build_default_importers(settings: ImportSettings | None = None) -> dict[str, BookImporter]:
    """Return the default format importer map."""

    config = settings or ImportSettings()
    extractor = EPUBExtractor(max_workers=config.extract_workers, temp_dir=config.temp_dir)
    importers: dict[str, BookImporter] = {
        "epub": EPUBImporter(extractor),
        "calibre": CalibreEBookImporter(
            extractor,
            converter_path=config.ebook_convert_path,
            temp_dir=config.temp_dir,
        ),
    }
    if PDFImporter is not None:
        importers["pdf"] = PDFImporter()
    importers["txt"] = TXTImporter(toc_limit=config.txt_toc_limit)
    return importers


def build_import_service(settings: ImportSettings | None = None) -> BookImportService:
    service = BookImportService()
    for name, importer in build_default_importers(settings).items():
        service.register_importer(name, importer)
    return service


__all__ = [
    "BatchImportResult",
    "Book",
    "BookFormat",
    "BookImportService",
    "BookImporter",
    "CalibreEBookImporter",
    "EPUBImporter",
    "ImportSettings",
    "PDFImporter",
    "TXTImporter",
    "build_default_importers",
    "build_import_service",
]
