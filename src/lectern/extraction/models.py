"""Data structures shared by the EPUB flattening pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from lectern.extraction import namespace


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """One discovered markup file, ranked by its position in discovery order."""

    canonical_path: str
    chapter_index: int
    raw_content: bytes
    path: Path
    relative_path: str

    @property
    def chapter_anchor_id(self) -> str:
        return namespace.chapter_anchor_id(self.chapter_index)


@dataclass(slots=True)
class RewrittenFragment:
    """Per-document output after anchor prefixing and reference resolution."""

    chapter_index: int
    html: str
    plain_text: str


@dataclass(slots=True)
class TOCNode:
    """A navigable table-of-contents entry addressed by an opaque token."""

    title: str
    token: str
    children: list[TOCNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "title": self.title,
            "token": self.token,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True, slots=True)
class ExtractedContent:
    """Terminal output of one extraction run."""

    plain_text: str
    rich_html: str
    table_of_contents: list[TOCNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "plain_text": self.plain_text,
            "rich_html": self.rich_html,
            "table_of_contents": [node.to_dict() for node in self.table_of_contents],
        }
