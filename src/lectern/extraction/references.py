"""Hyperlink resolution into the flattened chapter anchor namespace."""

from __future__ import annotations

import logging
import posixpath
import re
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup

from lectern.extraction.anchors import prefixed_anchor
from lectern.extraction.namespace import AnchorNamespace
from lectern.extraction.normalization import canonical_path_key, sanitize_anchor

logger = logging.getLogger(__name__)

EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "data:", "javascript:")

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]+):")


def split_reference(href: str) -> tuple[str, str]:
    """Split ``path?query#fragment`` into a decoded path and the raw fragment."""

    path, _, fragment = href.partition("#")
    path = path.split("?", 1)[0]
    path = unquote(path.replace("\\", "/"))
    return path, fragment


def join_member_path(path: str, base_relative_path: str) -> str:
    """Resolve ``path`` against the directory of ``base_relative_path``.

    Paths starting with ``/`` are taken relative to the extraction root. The
    result is a normalized root-relative POSIX path, which starts with ``..``
    when it points outside the root.
    """

    if path.startswith("/"):
        joined = path.lstrip("/")
    else:
        joined = posixpath.join(posixpath.dirname(base_relative_path), path)
    return posixpath.normpath(joined)


def escapes_root(member_path: str) -> bool:
    return member_path == ".." or member_path.startswith("../") or posixpath.isabs(member_path)


def _same_chapter(chapter_anchor: str, fragment: str) -> str:
    if not sanitize_anchor(fragment):
        return f"#{chapter_anchor}"
    return f"#{prefixed_anchor(chapter_anchor, fragment)}"


class ReferenceResolver:
    """Rewrite relative and fragment-only references to chapter anchors."""

    def __init__(self, namespace: AnchorNamespace) -> None:
        self._namespace = namespace

    @property
    def namespace(self) -> AnchorNamespace:
        return self._namespace

    def resolve(self, href: str, *, chapter_anchor: str, base_relative_path: str) -> str | None:
        """Return the rewritten ``#anchor`` for ``href`` or ``None`` to keep it.

        ``None`` covers external links, non-file URIs without a fragment and
        paths that match no discovered document.
        """

        reference = href.strip()
        if reference.lower().startswith(EXTERNAL_PREFIXES):
            return None

        if reference.startswith("#"):
            return _same_chapter(chapter_anchor, reference[1:])

        scheme_match = _SCHEME_RE.match(reference)
        if scheme_match and scheme_match.group(1).lower() != "file":
            fragment = urlsplit(reference).fragment
            if not fragment:
                return None
            return _same_chapter(chapter_anchor, fragment)

        if scheme_match:
            parsed = urlsplit(reference)
            path, fragment = unquote(parsed.path), parsed.fragment
        else:
            path, fragment = split_reference(reference)

        if not path:
            return _same_chapter(chapter_anchor, fragment)

        member_path = join_member_path(path, base_relative_path)
        if escapes_root(member_path):
            member_path = posixpath.basename(member_path)

        target = self._namespace.lookup(canonical_path_key(member_path))
        if target is None:
            logger.debug("Leaving dangling reference unchanged: %s (from %s)", href, base_relative_path)
            return None

        if not fragment:
            return f"#{target}"
        return f"#{prefixed_anchor(target, fragment)}"

    def rewrite_links(self, fragment: BeautifulSoup, *, chapter_anchor: str, base_relative_path: str) -> int:
        """Rewrite every ``<a href>`` in place and return how many changed."""

        rewritten = 0
        for link in fragment.find_all("a", href=True):
            target = self.resolve(
                str(link["href"]),
                chapter_anchor=chapter_anchor,
                base_relative_path=base_relative_path,
            )
            if target is None:
                continue
            link["href"] = target
            rewritten += 1
        return rewritten
