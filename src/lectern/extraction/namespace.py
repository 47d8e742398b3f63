"""Chapter anchor namespace keyed by canonical member path."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping

from lectern.extraction.discovery import relative_posix_path
from lectern.extraction.normalization import canonical_path_key

logger = logging.getLogger(__name__)

CHAPTER_ANCHOR_PREFIX = "chapter-"


def chapter_anchor_id(chapter_index: int) -> str:
    return f"{CHAPTER_ANCHOR_PREFIX}{chapter_index}"


class AnchorNamespace:
    """Read-only map from canonical path key to chapter anchor id."""

    def __init__(self, anchors: Mapping[str, str]) -> None:
        self._anchors = dict(anchors)

    @classmethod
    def from_paths(cls, paths: Iterable[Path], root: Path) -> AnchorNamespace:
        """Assign chapter indices in the given (already sorted) order.

        Members whose paths differ only by case share one key; the later
        member owns it.
        """

        anchors: dict[str, str] = {}
        for index, path in enumerate(paths):
            relative_path = relative_posix_path(path, root)
            key = canonical_path_key(relative_path)
            anchor = chapter_anchor_id(index)
            previous = anchors.get(key)
            if previous is not None:
                logger.warning(
                    "Path key %r of %s already mapped to %s; links now target %s",
                    key,
                    relative_path,
                    previous,
                    anchor,
                )
            anchors[key] = anchor
        return cls(anchors)

    def lookup(self, canonical_key: str) -> str | None:
        return self._anchors.get(canonical_key)

    def __contains__(self, canonical_key: object) -> bool:
        return canonical_key in self._anchors

    def __len__(self) -> int:
        return len(self._anchors)

    def as_dict(self) -> dict[str, str]:
        return dict(self._anchors)
