from __future__ import annotations

from pathlib import Path
import re
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile

import pytest

from lectern.errors import EmptyContentError, UnpackError
from lectern.extraction.engine import EPUBExtractor

_TOC_NCX = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <navMap>
    <navPoint id="outer">
      <navLabel><text>Lost Part</text></navLabel>
      <content src="gone.xhtml"/>
      <navPoint id="inner">
        <navLabel><text>Section One</text></navLabel>
        <content src="b.xhtml#sec1"/>
      </navPoint>
    </navPoint>
    <navPoint id="last">
      <navLabel><text>Chapter C</text></navLabel>
      <content src="c.xhtml"/>
    </navPoint>
  </navMap>
</ncx>
"""


def _write_members(root: Path, members: dict[str, str | bytes]) -> None:
    for name, content in members.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


def _scenario_book(root: Path) -> None:
    _write_members(
        root,
        {
            "a.xhtml": '<html><body id="top"><p>Go <a href="b.xhtml#sec1">next</a></p></body></html>',
            "b.xhtml": '<html><body id="top"><h2 id="sec1">Section</h2><p>Body B</p></body></html>',
            "c.xhtml": (
                '<html><body id="top"><p>C text <a href="https://example.com">web</a> '
                '<a href="missing.xhtml#x">lost</a> <a href="#top">up</a></p></body></html>'
            ),
            "toc.ncx": _TOC_NCX,
        },
    )


def test_cross_document_link_resolves_to_prefixed_target(tmp_path: Path) -> None:
    _scenario_book(tmp_path)

    content = EPUBExtractor().extract_directory(tmp_path)

    assert 'href="#chapter-1-sec1"' in content.rich_html
    assert 'id="chapter-1-sec1"' in content.rich_html
    assert 'id="chapter-0-top"' in content.rich_html
    assert 'id="chapter-2-top"' in content.rich_html
    assert '<section id="chapter-2">' in content.rich_html


def test_external_and_dangling_links_are_untouched(tmp_path: Path) -> None:
    _scenario_book(tmp_path)

    content = EPUBExtractor().extract_directory(tmp_path)

    assert 'href="https://example.com"' in content.rich_html
    assert 'href="missing.xhtml#x"' in content.rich_html
    assert 'href="#chapter-2-top"' in content.rich_html


def test_plain_text_and_html_follow_chapter_order(tmp_path: Path) -> None:
    _scenario_book(tmp_path)

    content = EPUBExtractor().extract_directory(tmp_path)

    assert content.plain_text == "Go next\n\nSection\nBody B\n\nC text web lost up"
    sections = re.findall(r'<section id="(chapter-\d+)">', content.rich_html)
    assert sections == ["chapter-0", "chapter-1", "chapter-2"]
    assert content.rich_html.count('<hr class="chapter-break" />') == 2


def test_every_emitted_id_is_unique_across_chapters(tmp_path: Path) -> None:
    _scenario_book(tmp_path)

    content = EPUBExtractor().extract_directory(tmp_path)
    ids = re.findall(r'\bid="([^"]+)"', content.rich_html)

    assert len(ids) == len(set(ids))


def test_toc_promotes_resolved_child_of_unresolved_entry(tmp_path: Path) -> None:
    _scenario_book(tmp_path)

    content = EPUBExtractor().extract_directory(tmp_path)

    assert [(node.title, node.token, node.children) for node in content.table_of_contents] == [
        ("Section One", "chapter-1-sec1", []),
        ("Chapter C", "chapter-2", []),
    ]


def test_book_without_readable_content_fails(tmp_path: Path) -> None:
    _write_members(
        tmp_path,
        {
            "one.xhtml": "<html><body>\n   </body></html>",
            "two.html": "<html><head><title>Only head</title></head><body></body></html>",
        },
    )

    with pytest.raises(EmptyContentError, match="No readable text found in EPUB"):
        EPUBExtractor().extract_directory(tmp_path)


def test_directory_without_documents_fails(tmp_path: Path) -> None:
    with pytest.raises(EmptyContentError):
        EPUBExtractor().extract_directory(tmp_path)


def test_empty_chapter_keeps_later_chapter_indices(tmp_path: Path) -> None:
    _write_members(
        tmp_path,
        {
            "a.xhtml": "<html><body></body></html>",
            "b.xhtml": '<html><body><p id="p">Kept</p></body></html>',
        },
    )

    content = EPUBExtractor().extract_directory(tmp_path)

    assert content.plain_text == "Kept"
    assert content.rich_html == '<section id="chapter-1"><p id="chapter-1-p">Kept</p></section>'


def test_images_are_inlined_in_flattened_html(tmp_path: Path) -> None:
    _write_members(
        tmp_path,
        {
            "OEBPS/Text/a.xhtml": '<html><body><p>Pic</p><img src="../Images/p.gif" alt="p"/></body></html>',
            "OEBPS/Images/p.gif": b"GIF89a-data",
        },
    )

    content = EPUBExtractor().extract_directory(tmp_path)

    assert 'src="data:image/gif;base64,' in content.rich_html
    assert "../Images/p.gif" not in content.rich_html


def test_parallel_extraction_matches_sequential(tmp_path: Path) -> None:
    _scenario_book(tmp_path)
    for index in range(6):
        _write_members(tmp_path, {f"d{index}.xhtml": f'<html><body><p id="n">Extra {index}</p></body></html>'})

    sequential = EPUBExtractor().extract_directory(tmp_path)
    parallel = EPUBExtractor(max_workers=4).extract_directory(tmp_path)

    assert parallel == sequential


def test_repeated_runs_are_identical(tmp_path: Path) -> None:
    _scenario_book(tmp_path)

    assert EPUBExtractor().extract_directory(tmp_path) == EPUBExtractor().extract_directory(tmp_path)


def _write_epub(path: Path) -> None:
    with ZipFile(path, "w") as archive:
        archive.writestr("mimetype", "application/epub+zip", compress_type=ZIP_STORED)
        archive.writestr(
            "OEBPS/ch1.xhtml",
            '<html><body id="c1"><h1>One</h1><a href="ch2.xhtml">next</a></body></html>',
            compress_type=ZIP_DEFLATED,
        )
        archive.writestr(
            "OEBPS/ch2.xhtml",
            '<html><body><h1 id="two">Two</h1></body></html>',
            compress_type=ZIP_DEFLATED,
        )


def test_extract_archive_cleans_up_its_workdir(tmp_path: Path) -> None:
    epub_path = tmp_path / "book.epub"
    _write_epub(epub_path)
    workdir = tmp_path / "work"
    workdir.mkdir()

    content = EPUBExtractor(temp_dir=workdir).extract_archive(epub_path)

    assert content.plain_text == "One\nnext\n\nTwo"
    assert 'href="#chapter-1"' in content.rich_html
    assert list(workdir.iterdir()) == []


def test_extract_archive_reports_unpack_failure_and_cleans_up(tmp_path: Path) -> None:
    broken = tmp_path / "broken.epub"
    broken.write_bytes(b"not a zip archive")
    workdir = tmp_path / "work"
    workdir.mkdir()

    with pytest.raises(UnpackError, match="Could not unzip EPUB file"):
        EPUBExtractor(temp_dir=workdir).extract_archive(broken)

    assert list(workdir.iterdir()) == []


def test_extract_archive_removes_workdir_after_empty_content(tmp_path: Path) -> None:
    epub_path = tmp_path / "blank.epub"
    with ZipFile(epub_path, "w") as archive:
        archive.writestr("OEBPS/blank.xhtml", "<html><body> </body></html>")
    workdir = tmp_path / "work"
    workdir.mkdir()

    with pytest.raises(EmptyContentError) as error_info:
        EPUBExtractor(temp_dir=workdir).extract_archive(epub_path)

    assert error_info.value.path == epub_path
    assert list(workdir.iterdir()) == []


def test_ids_differing_only_in_combining_marks_stay_distinct(tmp_path: Path) -> None:
    _write_members(
        tmp_path,
        {"a.xhtml": '<html><body><h2 id="कि">One</h2><h2 id="का">Two</h2><a href="#का">jump</a></body></html>'},
    )

    content = EPUBExtractor().extract_directory(tmp_path)

    assert content.rich_html.count('id="chapter-0-कि"') == 1
    assert content.rich_html.count('id="chapter-0-का"') == 1
    assert 'href="#chapter-0-का"' in content.rich_html
