"""EPUB flattening engine interfaces."""

from lectern.errors import EmptyContentError, ExtractionError, UnpackError

from .engine import EPUBExtractor
from .models import ExtractedContent, TOCNode

__all__ = [
    "EPUBExtractor",
    "EmptyContentError",
    "ExtractedContent",
    "ExtractionError",
    "TOCNode",
    "UnpackError",
]
