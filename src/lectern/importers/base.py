"""Shared contract for per-format book importers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from lectern.importers.models import Book


@runtime_checkable
class BookImporter(Protocol):
    """Protocol that every format importer must implement."""

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        """Return True when this importer can read the given file."""

    def import_book(self, path: Path) -> Book:
        """Read the file into a ``Book`` or raise an ``ImportFailure``."""
