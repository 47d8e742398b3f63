"""Plain-text importer with encoding detection and heading-based TOC."""

from __future__ import annotations

import logging
from pathlib import Path
import re

from charset_normalizer import from_bytes

from lectern.errors import UnreadableBookError
from lectern.extraction.models import TOCNode
from lectern.importers.config import DEFAULT_TXT_TOC_LIMIT
from lectern.importers.models import Book, BookFormat

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(
    r"^\s*第[0-9一二三四五六七八九十百千零〇两]+[章节回卷部幕]\s*.*$"
    r"|^\s*(序章|序幕|前言|后记|尾声|引子)\s*$"
    r"|^\s*(chapter|prologue|epilogue)\b.*$",
    re.IGNORECASE,
)

_FALLBACK_ENCODINGS = ("utf-16", "gb18030")


def text_token(offset: int, length: int) -> str:
    """Token addressing a character span of the raw text."""

    return f"text:{offset}:{max(length, 1)}"


def extract_heading_toc(text: str, *, limit: int = DEFAULT_TXT_TOC_LIMIT) -> list[TOCNode]:
    """Build a flat TOC from lines that look like chapter headings."""

    items: list[TOCNode] = []
    offset = 0
    for line in text.splitlines(keepends=True):
        line_start = offset
        offset += len(line)
        heading = line.strip()
        if not heading or not _HEADING_RE.match(heading):
            continue
        items.append(TOCNode(title=heading, token=text_token(line_start, len(line))))
        if len(items) >= limit:
            break
    return items


class TXTImporter:
    """Import plain-text books with robust charset handling."""

    def __init__(self, *, toc_limit: int = DEFAULT_TXT_TOC_LIMIT) -> None:
        self._toc_limit = toc_limit

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() == ".txt":
            return True
        if sniffed_bytes is None:
            return False

        if path.suffix.lower() in {".pdf", ".epub", ".mobi", ".azw3", ".zip"}:
            return False

        prefix = sniffed_bytes.lstrip()
        if prefix.startswith((b"%PDF-", b"PK\x03\x04", b"<?xml", b"BOOKMOBI")):
            return False

        return b"\x00" not in sniffed_bytes

    def import_book(self, path: Path) -> Book:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise UnreadableBookError(path, f"Could not read file: {exc}") from exc

        text = self._decode(path, raw)
        return Book(
            title=path.stem,
            source_path=path,
            format=BookFormat.TXT,
            text_content=text,
            table_of_contents=extract_heading_toc(text, limit=self._toc_limit),
        )

    def _decode(self, path: Path, raw: bytes) -> str:
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        best = from_bytes(raw).best()
        if best and best.encoding:
            logger.debug("Detected %s encoding for %s", best.encoding, path.name)
            return str(best)

        for fallback in _FALLBACK_ENCODINGS:
            try:
                return raw.decode(fallback)
            except UnicodeDecodeError:
                continue
        raise UnreadableBookError(path, "Could not detect text encoding")
