"""CLI command importing books and reporting the flattened results."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from lectern.cli._logging import configure_logging
from lectern.importers import build_import_service
from lectern.importers.config import ImportSettings
from lectern.importers.models import Book

logger = logging.getLogger(__name__)

_SUPPORTED_SUFFIXES = {".epub", ".txt", ".pdf", ".mobi", ".azw3"}


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(
            path for path in target.rglob("*") if path.is_file() and path.suffix.lower() in _SUPPORTED_SUFFIXES
        )
    return []


def _write_outputs(book: Book, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = book.source_path.stem
    if book.text_content is not None:
        (output_dir / f"{stem}.txt").write_text(book.text_content, encoding="utf-8")
    if book.rich_html is not None:
        (output_dir / f"{stem}.html").write_text(book.rich_html, encoding="utf-8")
    toc = [node.to_dict() for node in book.table_of_contents]
    (output_dir / f"{stem}.toc.json").write_text(json.dumps(toc, ensure_ascii=False, indent=2), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import books and emit flattened content summaries")
    parser.add_argument("--path", required=True, help="Source file or directory")
    parser.add_argument("--output-dir", default=None, help="Directory for .txt/.html/.toc.json outputs")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging(args.log_level)
    try:
        settings = ImportSettings.from_env()
    except ValueError as error:
        logger.error("Configuration error: %s", error)
        return 2

    source_path = Path(args.path)
    service = build_import_service(settings)
    batch = service.import_many(_collect_inputs(source_path))

    if args.output_dir:
        for book in batch.books:
            _write_outputs(book, Path(args.output_dir))

    payload = {
        "path": str(source_path),
        "processed": len(batch.books),
        "results": [book.summary() for book in batch.books],
        "errors": [{"source_path": str(error.path), "error": str(error)} for error in batch.errors],
        "first_error": batch.first_error_message,
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0 if not batch.errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
