"""Runtime configuration for book importers."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping


DEFAULT_EXTRACT_WORKERS = 1
DEFAULT_TXT_TOC_LIMIT = 400


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class ImportSettings:
    """Validated importer settings."""

    temp_dir: Path | None = None
    ebook_convert_path: Path | None = None
    extract_workers: int = DEFAULT_EXTRACT_WORKERS
    txt_toc_limit: int = DEFAULT_TXT_TOC_LIMIT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ImportSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        temp_dir: Path | None = None
        temp_dir_raw = source.get("LECTERN_TEMP_DIR", "").strip()
        if temp_dir_raw:
            temp_dir = Path(temp_dir_raw)
            if not temp_dir.is_dir():
                raise ValueError(f"LECTERN_TEMP_DIR does not exist: {temp_dir_raw}")

        convert_raw = source.get("LECTERN_EBOOK_CONVERT", "").strip()
        ebook_convert_path = Path(convert_raw) if convert_raw else None

        workers_raw = source.get("LECTERN_EXTRACT_WORKERS", str(DEFAULT_EXTRACT_WORKERS)).strip()
        toc_limit_raw = source.get("LECTERN_TXT_TOC_LIMIT", str(DEFAULT_TXT_TOC_LIMIT)).strip()

        if not workers_raw:
            raise ValueError("LECTERN_EXTRACT_WORKERS cannot be empty")
        if not toc_limit_raw:
            raise ValueError("LECTERN_TXT_TOC_LIMIT cannot be empty")

        return cls(
            temp_dir=temp_dir,
            ebook_convert_path=ebook_convert_path,
            extract_workers=_parse_positive_int(name="LECTERN_EXTRACT_WORKERS", raw_value=workers_raw),
            txt_toc_limit=_parse_positive_int(name="LECTERN_TXT_TOC_LIMIT", raw_value=toc_limit_raw),
        )
