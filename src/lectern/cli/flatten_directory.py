"""CLI command running the flattening engine on an unpacked EPUB directory."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from dotenv import load_dotenv

from lectern.cli._logging import configure_logging
from lectern.errors import ExtractionError
from lectern.extraction.engine import EPUBExtractor


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Flatten an unpacked EPUB directory into one document")
    parser.add_argument("--root", required=True, help="Directory holding the unpacked EPUB members")
    parser.add_argument("--workers", type=int, default=1, help="Documents processed in parallel")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging(args.log_level)

    extractor = EPUBExtractor(max_workers=max(args.workers, 1))
    try:
        content = extractor.extract_directory(Path(args.root))
    except ExtractionError as error:
        print(json.dumps({"root": args.root, "error": str(error)}, ensure_ascii=True, indent=2))
        return 1

    print(json.dumps(content.to_dict(), ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
