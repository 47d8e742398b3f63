"""MOBI/AZW3 importer converting through Calibre's ``ebook-convert``."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
import subprocess
import tempfile
from typing import Sequence

from lectern.errors import ConversionFailedError, ConverterNotFoundError, EmptyContentError
from lectern.extraction.engine import EPUBExtractor
from lectern.importers.models import Book, BookFormat

logger = logging.getLogger(__name__)

CONVERTER_NAME = "ebook-convert"
KNOWN_CONVERTER_PATHS = (
    Path("/usr/local/bin/ebook-convert"),
    Path("/opt/homebrew/bin/ebook-convert"),
    Path("/Applications/calibre.app/Contents/MacOS/ebook-convert"),
    Path("/usr/bin/ebook-convert"),
)
DEFAULT_CONVERSION_TIMEOUT_SECONDS = 600.0

_FORMATS_BY_SUFFIX = {".mobi": BookFormat.MOBI, ".azw3": BookFormat.AZW3}


def find_converter(
    explicit_path: Path | None = None,
    *,
    candidates: Sequence[Path] = KNOWN_CONVERTER_PATHS,
) -> Path | None:
    """Locate an executable ``ebook-convert``."""

    if explicit_path is not None:
        return explicit_path if os.access(explicit_path, os.X_OK) else None

    on_path = shutil.which(CONVERTER_NAME)
    if on_path:
        return Path(on_path)
    for candidate in candidates:
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
    return None


class CalibreEBookImporter:
    """Convert Kindle formats to EPUB, then run the EPUB pipeline."""

    def __init__(
        self,
        extractor: EPUBExtractor | None = None,
        *,
        converter_path: Path | None = None,
        temp_dir: Path | None = None,
        timeout_seconds: float = DEFAULT_CONVERSION_TIMEOUT_SECONDS,
    ) -> None:
        self._extractor = extractor or EPUBExtractor()
        self._converter_path = converter_path
        self._temp_dir = temp_dir
        self._timeout_seconds = timeout_seconds

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() in _FORMATS_BY_SUFFIX:
            return True
        if sniffed_bytes is None:
            return False
        # PalmDOC database header: the type/creator pair sits at offset 60.
        return sniffed_bytes[60:68] == b"BOOKMOBI"

    def import_book(self, path: Path) -> Book:
        book_format = _FORMATS_BY_SUFFIX.get(path.suffix.lower(), BookFormat.MOBI)
        converter = find_converter(self._converter_path)
        if converter is None:
            raise ConverterNotFoundError(
                path,
                "MOBI/AZW3 import requires Calibre CLI (ebook-convert). Install Calibre first.",
            )

        with tempfile.TemporaryDirectory(prefix="lectern-calibre-", dir=self._temp_dir) as workdir:
            output = Path(workdir) / "out.epub"
            self._convert(converter, path, output)
            if not output.is_file():
                raise EmptyContentError(path, "Converted output is empty")
            extracted = self._extractor.extract_archive(output)

        return Book(
            title=path.stem,
            source_path=path,
            format=book_format,
            text_content=extracted.plain_text,
            rich_html=extracted.rich_html,
            table_of_contents=extracted.table_of_contents,
        )

    def _convert(self, converter: Path, source: Path, output: Path) -> None:
        logger.info("Converting %s to EPUB with %s", source.name, converter)
        try:
            completed = subprocess.run(
                [str(converter), str(source), str(output)],
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise ConversionFailedError(source, f"ebook-convert failed: {exc}") from exc

        if completed.returncode != 0:
            message = (completed.stderr or "").strip() or "unknown error"
            raise ConversionFailedError(source, f"ebook-convert failed: {message}")
