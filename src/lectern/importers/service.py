"""Routing entrypoint for book importers and batch imports."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Iterable

from lectern.errors import ImportFailure, UnreadableBookError, UnsupportedFormatError
from lectern.importers.base import BookImporter
from lectern.importers.models import Book

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchImportResult:
    """Outcome of importing several files; failures never abort siblings."""

    books: list[Book] = field(default_factory=list)
    errors: list[ImportFailure] = field(default_factory=list)

    @property
    def first_error_message(self) -> str | None:
        return str(self.errors[0]) if self.errors else None


class BookImportService:
    """Resolve the right importer and return a readable ``Book``."""

    def __init__(self, sniff_bytes: int = 4096) -> None:
        self._sniff_bytes = sniff_bytes
        self._importer_map: dict[str, BookImporter] = {}

    @property
    def importer_map(self) -> dict[str, BookImporter]:
        """Registered importers keyed by importer name."""

        return dict(self._importer_map)

    def register_importer(self, name: str, importer: BookImporter) -> None:
        if not name:
            raise ValueError("Importer name cannot be empty")
        self._importer_map[name] = importer

    def import_book(self, path: str | Path) -> Book:
        """Import one file, raising an ``ImportFailure`` subclass on failure."""

        source = Path(path)
        sniffed = self._sniff(source)

        # Extension matches win over content sniffing.
        for importer in self._importer_map.values():
            if importer.supports(source, None):
                return self._run(importer, source)
        for importer in self._importer_map.values():
            if importer.supports(source, sniffed):
                return self._run(importer, source)

        raise UnsupportedFormatError(source, f"Unsupported file type: {source.name}")

    def import_many(self, paths: Iterable[str | Path]) -> BatchImportResult:
        """Import every path, collecting failures instead of stopping."""

        result = BatchImportResult()
        for path in paths:
            try:
                result.books.append(self.import_book(path))
            except ImportFailure as exc:
                logger.error("Import failed: %s", exc)
                result.errors.append(exc)
        return result

    def _run(self, importer: BookImporter, source: Path) -> Book:
        try:
            return importer.import_book(source)
        except ImportFailure:
            raise
        except Exception as exc:
            raise ImportFailure(source, f"Importer failed: {exc}") from exc

    def _sniff(self, path: Path) -> bytes:
        try:
            with path.open("rb") as handle:
                return handle.read(self._sniff_bytes)
        except OSError as exc:
            raise UnreadableBookError(path, f"Failed to read source file: {exc}") from exc
