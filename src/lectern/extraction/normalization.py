"""Path, identifier and whitespace normalization helpers."""

from __future__ import annotations

import re
import unicodedata
from urllib.parse import unquote

_WHITESPACE_RE = re.compile(r"\s+")
_ANCHOR_PUNCTUATION = frozenset("-_:.")
# Letters, marks and numbers; ``\w`` misses combining marks.
_ANCHOR_CATEGORY_CLASSES = frozenset("LMN")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def canonical_path_key(raw_path: str) -> str:
    """Return the lookup key shared by every spelling of the same member path.

    Backslashes become forward slashes, percent-escapes are decoded, leading
    ``./`` segments are removed and the result is lower-cased.
    """

    value = raw_path.strip().replace("\\", "/")
    value = unquote(value)
    while value.startswith("./"):
        value = value[2:]
    return value.lower()


def _is_anchor_char(char: str) -> bool:
    return char in _ANCHOR_PUNCTUATION or unicodedata.category(char)[0] in _ANCHOR_CATEGORY_CLASSES


def sanitize_anchor(value: str) -> str:
    """Reduce an identifier to letters, marks, numbers and ``-_:.``.

    Runs of any other character become a single ``-``. Applying the function
    to its own output returns it unchanged.
    """

    parts: list[str] = []
    for char in unquote(value):
        if _is_anchor_char(char):
            if char == "-" and parts and parts[-1] == "-":
                continue
            parts.append(char)
        elif not parts or parts[-1] != "-":
            parts.append("-")
    return "".join(parts)
