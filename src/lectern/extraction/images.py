"""Replace local image references with embedded data URIs."""

from __future__ import annotations

import base64
import logging
from pathlib import Path

from bs4 import BeautifulSoup

from lectern.extraction.references import escapes_root, join_member_path, split_reference

logger = logging.getLogger(__name__)

_PASSTHROUGH_PREFIXES = ("data:", "http://", "https://")

IMAGE_MIME_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}
FALLBACK_MIME_TYPE = "application/octet-stream"


def mime_type_for(path: Path) -> str:
    return IMAGE_MIME_TYPES.get(path.suffix.lower().lstrip("."), FALLBACK_MIME_TYPE)


def image_data_uri(src: str, *, root: Path, base_relative_path: str) -> str | None:
    """Build a ``data:`` URI for a local image, or ``None`` to keep ``src``."""

    if src.strip().lower().startswith(_PASSTHROUGH_PREFIXES):
        return None

    path, _fragment = split_reference(src.strip())
    if not path:
        return None

    member_path = join_member_path(path, base_relative_path)
    if escapes_root(member_path):
        logger.debug("Skipping image outside extraction root: %s", src)
        return None

    image_path = root / member_path
    try:
        payload = image_path.read_bytes()
    except OSError as exc:
        logger.debug("Skipping unreadable image %s: %s", image_path, exc)
        return None
    if not payload:
        logger.debug("Skipping empty image %s", image_path)
        return None

    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type_for(image_path)};base64,{encoded}"


def inline_images(fragment: BeautifulSoup, *, root: Path, base_relative_path: str) -> int:
    """Embed every resolvable ``<img src>`` in place; returns the count."""

    inlined = 0
    for image in fragment.find_all("img", src=True):
        data_uri = image_data_uri(str(image["src"]), root=root, base_relative_path=base_relative_path)
        if data_uri is None:
            continue
        image["src"] = data_uri
        inlined += 1
    return inlined
