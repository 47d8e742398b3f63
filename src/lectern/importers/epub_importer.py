"""EPUB importer flattening every chapter into one linked document."""

from __future__ import annotations

from pathlib import Path

from lectern.extraction.engine import EPUBExtractor
from lectern.importers.models import Book, BookFormat

_ZIP_MAGIC = b"PK\x03\x04"


class EPUBImporter:
    """Import ``.epub`` containers through the flattening engine."""

    def __init__(self, extractor: EPUBExtractor | None = None) -> None:
        self._extractor = extractor or EPUBExtractor()

    @property
    def extractor(self) -> EPUBExtractor:
        return self._extractor

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        suffix = path.suffix.lower()
        if suffix == ".epub":
            return True
        if sniffed_bytes is None or suffix in {".zip", ".fbz", ".mobi", ".azw3", ".pdf", ".txt"}:
            return False
        return sniffed_bytes.startswith(_ZIP_MAGIC) and b"application/epub+zip" in sniffed_bytes[:128]

    def import_book(self, path: Path) -> Book:
        extracted = self._extractor.extract_archive(path)
        return Book(
            title=path.stem,
            source_path=path,
            format=BookFormat.EPUB,
            text_content=extracted.plain_text,
            rich_html=extracted.rich_html,
            table_of_contents=extracted.table_of_contents,
        )
