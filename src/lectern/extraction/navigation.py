"""NCX navigation parsing and table-of-contents construction."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Sequence

from lxml import etree

from lectern.extraction.discovery import relative_posix_path
from lectern.extraction.models import TOCNode
from lectern.extraction.namespace import chapter_anchor_id
from lectern.extraction.normalization import normalize_whitespace
from lectern.extraction.references import ReferenceResolver

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"

# Fragment-only and empty-path navigation sources point into the first chapter.
_NAVIGATION_CHAPTER = chapter_anchor_id(0)


@dataclass(slots=True)
class NavEntry:
    """One parsed ``navPoint`` before its source is resolved."""

    title: str = ""
    source: str | None = None
    children: list[NavEntry] = field(default_factory=list)


def _local_name(element: etree._Element) -> str:
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname.lower()


def _first_text(element: etree._Element) -> str:
    for node in element.iter():
        if _local_name(node) != "text":
            continue
        text = normalize_whitespace("".join(node.itertext()))
        if text:
            return text
    return ""


def _parse_nav_point(element: etree._Element) -> NavEntry:
    entry = NavEntry()
    for child in element:
        name = _local_name(child)
        if name == "navlabel" and not entry.title:
            entry.title = _first_text(child)
        elif name == "text" and not entry.title:
            entry.title = normalize_whitespace("".join(child.itertext()))
        elif name == "content" and entry.source is None:
            entry.source = child.get("src")
        elif name == "navpoint":
            entry.children.append(_parse_nav_point(child))
    return entry


def _nav_points(parent: etree._Element) -> list[NavEntry]:
    return [_parse_nav_point(child) for child in parent if _local_name(child) == "navpoint"]


def parse_ncx(data: bytes) -> list[NavEntry]:
    """Parse NCX bytes into a forest of navigation entries.

    Raises ``ValueError`` (or ``etree.XMLSyntaxError``) when nothing can be
    recovered.
    """

    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True, load_dtd=False)
    root = etree.fromstring(data, parser=parser)
    if root is None:
        raise ValueError("Navigation document has no recoverable root element")

    for element in root.iter():
        if _local_name(element) == "navmap":
            return _nav_points(element)
    return _nav_points(root)


def build_toc(
    entries: Sequence[NavEntry],
    *,
    resolver: ReferenceResolver,
    base_relative_path: str,
) -> list[TOCNode]:
    """Resolve entries into TOC nodes.

    An entry whose source cannot be resolved emits no node; its resolved
    children take its place among its siblings.
    """

    nodes: list[TOCNode] = []
    for entry in entries:
        children = build_toc(entry.children, resolver=resolver, base_relative_path=base_relative_path)
        source = (entry.source or "").strip()
        target = None
        if source:
            target = resolver.resolve(
                source,
                chapter_anchor=_NAVIGATION_CHAPTER,
                base_relative_path=base_relative_path,
            )
        if target is None:
            logger.debug(
                "Unresolved navigation entry %r (%s); promoting %d children",
                entry.title,
                source,
                len(children),
            )
            nodes.extend(children)
            continue

        nodes.append(
            TOCNode(
                title=entry.title or UNTITLED,
                token=target.removeprefix("#"),
                children=children,
            )
        )
    return nodes


def load_table_of_contents(
    navigation_files: Sequence[Path],
    *,
    root: Path,
    resolver: ReferenceResolver,
) -> list[TOCNode]:
    """Return the tree from the first navigation file that yields any node."""

    for path in navigation_files:
        try:
            entries = parse_ncx(path.read_bytes())
        except (OSError, ValueError, etree.XMLSyntaxError) as exc:
            logger.warning("Skipping unreadable navigation file %s: %s", path, exc)
            continue

        nodes = build_toc(entries, resolver=resolver, base_relative_path=relative_posix_path(path, root))
        if nodes:
            return nodes
    return []
