"""Container unpacking into a scoped extraction directory."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from pathlib import Path
import tempfile
from typing import Iterator
from zipfile import BadZipFile, ZipFile

from lectern.errors import UnpackError

logger = logging.getLogger(__name__)

TEMP_PREFIX = "lectern-epub-"


def unpack_archive(path: Path, destination: Path) -> int:
    """Extract every zip member of ``path`` into ``destination``.

    Returns the number of members written. ``ZipFile.extractall`` drops
    absolute and parent-directory components from member names.
    """

    try:
        with ZipFile(path, "r") as archive:
            members = [name for name in archive.namelist() if not name.endswith("/")]
            archive.extractall(destination)
    except (BadZipFile, OSError, ValueError) as exc:
        raise UnpackError(path, f"Could not unzip EPUB file: {exc}") from exc
    return len(members)


@contextmanager
def unpacked_archive(path: str | Path, *, temp_dir: Path | None = None) -> Iterator[Path]:
    """Unpack ``path`` into a temporary directory removed on every exit path."""

    source = Path(path)
    with tempfile.TemporaryDirectory(prefix=TEMP_PREFIX, dir=temp_dir) as workdir:
        root = Path(workdir)
        count = unpack_archive(source, root)
        logger.debug("Unpacked %d members of %s into %s", count, source.name, root)
        yield root
