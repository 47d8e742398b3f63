"""Decoding and body isolation for individual markup documents."""

from __future__ import annotations

from bs4 import BeautifulSoup

_UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")
_MARKUP_PARSER = "html.parser"


class UndecodableDocumentError(ValueError):
    """Raised when none of the supported encodings can decode a document."""


def decode_markup(raw: bytes) -> str:
    """Decode document bytes trying UTF-8, then UTF-16, then Latin-1."""

    encodings = ["utf-8-sig"]
    if raw.startswith(_UTF16_BOMS):
        encodings.append("utf-16")
    encodings.append("latin-1")

    for encoding in encodings:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise UndecodableDocumentError("Document is not valid UTF-8, UTF-16 or Latin-1")


def parse_markup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, _MARKUP_PARSER)


def extract_body(markup: str) -> BeautifulSoup:
    """Return a fragment holding the first ``<body>`` content.

    When the body element carries an ``id`` (or, failing that, a ``name``),
    an empty ``<a>`` with the same identifier is placed at the start so that
    links to the document itself keep a target. Documents without a body
    element are returned whole.
    """

    soup = parse_markup(markup)
    body = soup.find("body")
    if body is None:
        return soup

    fragment = parse_markup("")
    identifier = body.get("id") or body.get("name")
    if isinstance(identifier, list):
        identifier = " ".join(identifier)
    if identifier:
        fragment.append(fragment.new_tag("a", attrs={"id": identifier, "name": identifier}))

    for child in list(body.contents):
        fragment.append(child.extract())
    return fragment
