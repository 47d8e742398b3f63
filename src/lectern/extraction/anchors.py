"""Chapter-scoped rewriting of element identifiers."""

from __future__ import annotations

from bs4 import BeautifulSoup

from lectern.extraction.normalization import sanitize_anchor


def prefixed_anchor(chapter_anchor: str, value: str) -> str:
    return f"{chapter_anchor}-{sanitize_anchor(value)}"


def rewrite_anchor_ids(fragment: BeautifulSoup, chapter_anchor: str) -> list[str]:
    """Prefix every ``id`` and every ``<a name>`` with the chapter anchor.

    Returns the identifiers written, in document order.
    """

    written: list[str] = []
    for tag in fragment.find_all(True):
        identifier = tag.get("id")
        if identifier is not None:
            tag["id"] = prefixed_anchor(chapter_anchor, str(identifier))
            written.append(tag["id"])
        if tag.name == "a":
            name = tag.get("name")
            if name is not None:
                tag["name"] = prefixed_anchor(chapter_anchor, str(name))
                if tag["name"] != tag.get("id"):
                    written.append(tag["name"])
    return written
