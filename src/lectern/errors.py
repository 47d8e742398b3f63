"""Typed failures surfaced by extraction and book import."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class ImportFailure(Exception):
    """Domain error describing the source that could not be imported."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


class ExtractionError(ImportFailure):
    """Fatal failure of one EPUB extraction run."""


class UnpackError(ExtractionError):
    """The container could not be unpacked into the extraction directory."""


class EmptyContentError(ExtractionError):
    """The flattened book has neither readable text nor markup."""


class UnsupportedFormatError(ImportFailure):
    """No importer accepts the file."""


class UnreadableBookError(ImportFailure):
    """The source file exists but cannot be opened or decoded."""


class ConverterNotFoundError(ImportFailure):
    """The external ebook converter is not installed."""


class ConversionFailedError(ImportFailure):
    """The external ebook converter exited with an error."""
