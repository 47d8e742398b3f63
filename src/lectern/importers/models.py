"""Imported book records shared by every format importer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
import uuid

from lectern.extraction.models import TOCNode


class BookFormat(str, Enum):
    TXT = "txt"
    PDF = "pdf"
    EPUB = "epub"
    MOBI = "mobi"
    AZW3 = "azw3"


@dataclass(slots=True)
class Book:
    """A readable book with its content and navigation tree."""

    title: str
    source_path: Path
    format: BookFormat
    text_content: str | None = None
    rich_html: str | None = None
    table_of_contents: list[TOCNode] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def summary(self) -> dict[str, object]:
        return {
            "id": self.id,
            "source_path": str(self.source_path),
            "title": self.title,
            "format": self.format.value,
            "text_chars": len(self.text_content or ""),
            "html_chars": len(self.rich_html or ""),
            "toc_entries": len(self.table_of_contents),
        }
