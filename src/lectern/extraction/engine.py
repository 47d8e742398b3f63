"""Extraction pipeline turning unpacked EPUB members into one flattened book."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from pathlib import Path

from lectern.errors import EmptyContentError
from lectern.extraction.anchors import rewrite_anchor_ids
from lectern.extraction.archive import unpacked_archive
from lectern.extraction.assembler import assemble
from lectern.extraction.body import UndecodableDocumentError, decode_markup, extract_body
from lectern.extraction.discovery import discover_files, relative_posix_path
from lectern.extraction.images import inline_images
from lectern.extraction.models import ExtractedContent, RewrittenFragment, SourceDocument
from lectern.extraction.namespace import AnchorNamespace
from lectern.extraction.navigation import load_table_of_contents
from lectern.extraction.normalization import canonical_path_key
from lectern.extraction.plaintext import html_to_plain_text
from lectern.extraction.references import ReferenceResolver

logger = logging.getLogger(__name__)


def load_document(path: Path, *, root: Path, chapter_index: int) -> SourceDocument | None:
    """Read one member file, or return ``None`` when it cannot be read."""

    relative_path = relative_posix_path(path, root)
    try:
        raw_content = path.read_bytes()
    except OSError as exc:
        logger.warning("Skipping unreadable document %s: %s", relative_path, exc)
        return None

    return SourceDocument(
        canonical_path=canonical_path_key(relative_path),
        chapter_index=chapter_index,
        raw_content=raw_content,
        path=path,
        relative_path=relative_path,
    )


def rewrite_document(document: SourceDocument, *, root: Path, resolver: ReferenceResolver) -> RewrittenFragment:
    """Run body extraction, anchor prefixing, link resolution and image inlining."""

    markup = decode_markup(document.raw_content)
    fragment = extract_body(markup)
    chapter_anchor = document.chapter_anchor_id

    rewrite_anchor_ids(fragment, chapter_anchor)
    resolver.rewrite_links(fragment, chapter_anchor=chapter_anchor, base_relative_path=document.relative_path)
    inline_images(fragment, root=root, base_relative_path=document.relative_path)

    html = fragment.decode()
    return RewrittenFragment(
        chapter_index=document.chapter_index,
        html=html,
        plain_text=html_to_plain_text(html),
    )


class EPUBExtractor:
    """Flatten an unpacked EPUB into plain text, linked HTML and a TOC."""

    def __init__(self, *, max_workers: int = 1, temp_dir: Path | None = None) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._max_workers = max_workers
        self._temp_dir = temp_dir

    def extract_archive(self, path: str | Path) -> ExtractedContent:
        """Unpack an EPUB container and extract it; the workdir is always removed."""

        source = Path(path)
        with unpacked_archive(source, temp_dir=self._temp_dir) as root:
            return self.extract_directory(root, source=source)

    def extract_directory(self, root: str | Path, *, source: Path | None = None) -> ExtractedContent:
        base = Path(root)
        label = source or base

        files = discover_files(base)
        namespace = AnchorNamespace.from_paths(files.documents, base)
        resolver = ReferenceResolver(namespace)
        table_of_contents = load_table_of_contents(files.navigation, root=base, resolver=resolver)

        fragments = self._rewrite_all(files.documents, root=base, resolver=resolver)
        plain_text, rich_html = assemble(fragments)
        if not plain_text and not rich_html:
            raise EmptyContentError(label, "No readable text found in EPUB")

        logger.info(
            "Extracted %s: %d/%d chapters, %d TOC roots",
            label,
            len(fragments),
            len(files.documents),
            len(table_of_contents),
        )
        return ExtractedContent(
            plain_text=plain_text,
            rich_html=rich_html,
            table_of_contents=table_of_contents,
        )

    def _rewrite_all(self, paths: list[Path], *, root: Path, resolver: ReferenceResolver) -> list[RewrittenFragment]:
        def process(indexed: tuple[int, Path]) -> RewrittenFragment | None:
            index, path = indexed
            document = load_document(path, root=root, chapter_index=index)
            if document is None:
                return None
            try:
                return rewrite_document(document, root=root, resolver=resolver)
            except UndecodableDocumentError as exc:
                logger.warning("Skipping undecodable document %s: %s", document.relative_path, exc)
                return None

        indexed_paths = list(enumerate(paths))
        if self._max_workers == 1 or len(indexed_paths) < 2:
            results = [process(item) for item in indexed_paths]
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                results = list(pool.map(process, indexed_paths))

        return [fragment for fragment in results if fragment is not None]
