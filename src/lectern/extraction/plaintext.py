"""Readable plain-text rendering of rewritten body markup."""

from __future__ import annotations

import re

_SCRIPT_RE = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style\b[^>]*>.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_BREAK_RE = re.compile(r"<br\b[^>]*>", re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(
    r"</(?:p|div|h[1-6]|li|tr|section|article|blockquote)\s*>",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]+>", re.DOTALL)
_ENTITY_RE = re.compile(r"&(nbsp|amp|lt|gt|quot|apos|#39);")
_HORIZONTAL_SPACE_RE = re.compile(r"[ \t\u00a0]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

_ENTITIES = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "#39": "'",
}


def decode_basic_entities(text: str) -> str:
    return _ENTITY_RE.sub(lambda match: _ENTITIES[match.group(1)], text)


def html_to_plain_text(html: str) -> str:
    text = _SCRIPT_RE.sub(" ", html)
    text = _STYLE_RE.sub(" ", text)
    text = _BREAK_RE.sub("\n", text)
    text = _BLOCK_CLOSE_RE.sub("\n", text)
    text = _TAG_RE.sub(" ", text)
    text = decode_basic_entities(text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_SPACE_RE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE_RE.sub("\n", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text.strip()
