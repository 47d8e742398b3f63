"""PDF importer exposing the document outline as page tokens."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pymupdf

from lectern.errors import UnreadableBookError
from lectern.extraction.models import TOCNode
from lectern.extraction.normalization import normalize_whitespace
from lectern.importers.models import Book, BookFormat

_PDF_MAGIC = b"%PDF-"


def page_token(page_index: int) -> str:
    return f"pdf-page:{max(page_index, 0)}"


def _outline_level(
    entries: Sequence[Sequence[object]],
    start: int,
    level: int,
) -> tuple[list[TOCNode], int]:
    nodes: list[TOCNode] = []
    index = start
    while index < len(entries):
        entry_level = int(entries[index][0])
        if entry_level < level:
            break

        title = normalize_whitespace(str(entries[index][1] or ""))
        page_number = int(entries[index][2])
        children, index = _outline_level(entries, index + 1, entry_level + 1)

        # Entries without a label or destination give way to their children.
        if not title or page_number < 1:
            nodes.extend(children)
            continue
        nodes.append(TOCNode(title=title, token=page_token(page_number - 1), children=children))
    return nodes, index


def outline_to_toc(entries: Sequence[Sequence[object]]) -> list[TOCNode]:
    """Convert ``Document.get_toc()`` rows (level, title, 1-based page) to a tree."""

    nodes, _ = _outline_level(entries, 0, 1)
    return nodes


class PDFImporter:
    """Import PDFs for page-based reading; only the outline is extracted."""

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() == ".pdf":
            return True
        if sniffed_bytes is None:
            return False
        return sniffed_bytes.startswith(_PDF_MAGIC)

    def import_book(self, path: Path) -> Book:
        try:
            with pymupdf.open(path) as doc:
                outline = doc.get_toc(simple=True)
        except (RuntimeError, ValueError, OSError) as exc:
            raise UnreadableBookError(path, f"Could not open PDF: {exc}") from exc

        return Book(
            title=path.stem,
            source_path=path,
            format=BookFormat.PDF,
            table_of_contents=outline_to_toc(outline),
        )
