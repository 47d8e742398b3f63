"""Join per-chapter output into the flattened plain-text and HTML documents."""

from __future__ import annotations

from typing import Iterable

from lectern.extraction.models import RewrittenFragment
from lectern.extraction.namespace import chapter_anchor_id

CHAPTER_BREAK = '<hr class="chapter-break" />'
TEXT_SEPARATOR = "\n\n"


def assemble(fragments: Iterable[RewrittenFragment]) -> tuple[str, str]:
    """Return ``(plain_text, rich_html)`` with chapters in index order."""

    ordered = sorted(fragments, key=lambda fragment: fragment.chapter_index)
    text_parts: list[str] = []
    html_parts: list[str] = []

    for fragment in ordered:
        if fragment.plain_text:
            text_parts.append(fragment.plain_text)
        if fragment.html.strip():
            anchor = chapter_anchor_id(fragment.chapter_index)
            html_parts.append(f'<section id="{anchor}">{fragment.html}</section>')

    plain_text = TEXT_SEPARATOR.join(text_parts).strip()
    rich_html = CHAPTER_BREAK.join(html_parts).strip()
    return plain_text, rich_html
