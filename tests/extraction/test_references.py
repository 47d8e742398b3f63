from __future__ import annotations

import pytest

from lectern.extraction.body import extract_body
from lectern.extraction.namespace import AnchorNamespace
from lectern.extraction.references import ReferenceResolver

_BASE = "OEBPS/Text/a.xhtml"


@pytest.fixture()
def resolver() -> ReferenceResolver:
    namespace = AnchorNamespace(
        {
            "oebps/text/a.xhtml": "chapter-0",
            "oebps/text/b.xhtml": "chapter-1",
            "oebps/notes/n.xhtml": "chapter-2",
        }
    )
    return ReferenceResolver(namespace)


def _resolve(resolver: ReferenceResolver, href: str) -> str | None:
    return resolver.resolve(href, chapter_anchor="chapter-0", base_relative_path=_BASE)


@pytest.mark.parametrize(
    "href",
    ["https://example.com", "HTTP://EXAMPLE.COM/x#y", "mailto:someone@example.com", "data:text/plain,hi", "javascript:void(0)"],
)
def test_external_links_are_left_unchanged(resolver: ReferenceResolver, href: str) -> None:
    assert _resolve(resolver, href) is None


def test_fragment_only_reference_stays_in_current_chapter(resolver: ReferenceResolver) -> None:
    assert _resolve(resolver, "#Note 1") == "#chapter-0-Note-1"
    assert _resolve(resolver, "#") == "#chapter-0"


@pytest.mark.parametrize(
    ("href", "expected"),
    [
        ("b.xhtml#sec1", "#chapter-1-sec1"),
        ("b.xhtml", "#chapter-1"),
        ("B.XHTML?x=1#s", "#chapter-1-s"),
        (" b.xhtml ", "#chapter-1"),
        ("./b.xhtml", "#chapter-1"),
        ("../Notes/n.xhtml#n%201", "#chapter-2-n-1"),
        ("..\\Notes\\n.xhtml", "#chapter-2"),
        ("/OEBPS/Text/b.xhtml#top", "#chapter-1-top"),
        ("file:///OEBPS/Text/b.xhtml#s", "#chapter-1-s"),
        ("?q=1#frag", "#chapter-0-frag"),
        ("a.xhtml#self", "#chapter-0-self"),
    ],
)
def test_path_references_resolve_to_target_chapter(resolver: ReferenceResolver, href: str, expected: str) -> None:
    assert _resolve(resolver, href) == expected


def test_dangling_reference_is_left_unchanged(resolver: ReferenceResolver) -> None:
    assert _resolve(resolver, "missing.xhtml#x") is None
    assert _resolve(resolver, "../Images/cover.jpg") is None


def test_other_schemes_only_keep_their_fragment(resolver: ReferenceResolver) -> None:
    assert _resolve(resolver, "urn:isbn:123") is None
    assert _resolve(resolver, "foo:bar#x") == "#chapter-0-x"


def test_paths_escaping_the_root_fall_back_to_file_name() -> None:
    resolver = ReferenceResolver(AnchorNamespace({"b.xhtml": "chapter-4"}))

    assert resolver.resolve("../../b.xhtml", chapter_anchor="chapter-0", base_relative_path="a.xhtml") == "#chapter-4"


def test_rewrite_links_updates_only_resolvable_anchors(resolver: ReferenceResolver) -> None:
    fragment = extract_body(
        '<body><p><a href="b.xhtml#sec1">x</a><a href="https://e.com">y</a>'
        '<a href="gone.xhtml">w</a><a>z</a></p></body>'
    )

    count = resolver.rewrite_links(fragment, chapter_anchor="chapter-0", base_relative_path=_BASE)
    hrefs = [link.get("href") for link in fragment.find_all("a")]

    assert count == 1
    assert hrefs == ["#chapter-1-sec1", "https://e.com", "gone.xhtml", None]
