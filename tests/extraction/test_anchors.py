from __future__ import annotations

from lectern.extraction.anchors import rewrite_anchor_ids
from lectern.extraction.body import extract_body


def test_rewrite_prefixes_ids_and_anchor_names() -> None:
    fragment = extract_body(
        '<body><h2 id="sec 1">T</h2><a name="n1">x</a><a id="i" name="i">y</a><span name="kept">z</span></body>'
    )

    written = rewrite_anchor_ids(fragment, "chapter-3")
    html = fragment.decode()

    assert written == ["chapter-3-sec-1", "chapter-3-n1", "chapter-3-i"]
    assert 'id="chapter-3-sec-1"' in html
    assert 'name="chapter-3-n1"' in html
    assert '<a id="chapter-3-i" name="chapter-3-i">' in html
    assert 'name="kept"' in html


def test_identical_ids_in_different_chapters_never_collide() -> None:
    first = extract_body('<body id="top"><p id="note">a</p><p id="x-1">b</p></body>')
    second = extract_body('<body id="top"><p id="note">a</p><p id="x">b</p></body>')

    first_ids = set(rewrite_anchor_ids(first, "chapter-1"))
    second_ids = set(rewrite_anchor_ids(second, "chapter-11"))

    assert first_ids
    assert second_ids
    assert first_ids.isdisjoint(second_ids)
