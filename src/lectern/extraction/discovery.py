"""Deterministic enumeration of body documents and navigation files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

BODY_SUFFIXES = frozenset({".xhtml", ".html", ".htm"})
NAVIGATION_SUFFIXES = frozenset({".ncx"})


@dataclass(slots=True)
class DiscoveredFiles:
    """Sorted candidate files found under one extraction root."""

    root: Path
    documents: list[Path] = field(default_factory=list)
    navigation: list[Path] = field(default_factory=list)


def relative_posix_path(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_files(root: str | Path) -> DiscoveredFiles:
    """Collect markup and navigation files sorted by their relative path."""

    base = Path(root)
    documents: list[Path] = []
    navigation: list[Path] = []

    for path in base.rglob("*"):
        if not path.is_file() or _is_hidden(path, base):
            continue
        suffix = path.suffix.lower()
        if suffix in BODY_SUFFIXES:
            documents.append(path)
        elif suffix in NAVIGATION_SUFFIXES:
            navigation.append(path)

    def sort_key(candidate: Path) -> str:
        return relative_posix_path(candidate, base)

    return DiscoveredFiles(
        root=base,
        documents=sorted(documents, key=sort_key),
        navigation=sorted(navigation, key=sort_key),
    )
