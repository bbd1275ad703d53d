"""Document names and the page identifiers generated from them.

Page identifiers are part of the output contract: anything linking to a
generated page must derive the same identifier.
"""

from __future__ import annotations

import posixpath
from pathlib import PurePosixPath

from .errors import MalformedDocumentNameError

_HEX_DIGITS = set("0123456789abcdefABCDEF")
# exported pages carry a 32 hex digit content id: "Getting Started 1a2b...90.md"
CONTENT_ID_LEN = 32


def file_ext(name: str) -> str:
    return PurePosixPath(name).suffix.lower()


def strip_content_id(stem: str) -> str:
    if len(stem) <= CONTENT_ID_LEN:
        return stem
    suffix = stem[-CONTENT_ID_LEN:]
    if not all(c in _HEX_DIGITS for c in suffix):
        return stem
    return stem[:-CONTENT_ID_LEN]


def page_id(name: str, html_ext: bool = True) -> str:
    """Derive the generated page identifier for markdown document ``name``.

    ``Getting Started 1a2b3c4d5e6f7890abcdef1234567890.md`` -> ``Getting-Started.html``
    """
    parts = name.split(".")
    if len(parts) != 2 or parts[1] != "md":
        raise MalformedDocumentNameError(name)
    stem = strip_content_id(parts[0]).strip()
    stem = stem.replace(" ", "-")
    if html_ext:
        stem += ".html"
    return stem


def page_file_name(name: str) -> str:
    """Output file for ``name``; always has ``.html`` even with clean URLs."""
    return page_id(name, html_ext=True)


def page_title(name: str) -> str:
    title = page_id(name, html_ext=True)
    title = title.replace(".html", "")
    return title.replace("-", " ")


def normalize_document_name(name: str, serve_prefix: str = "") -> str:
    name = name.replace("\\", "/")
    if serve_prefix and name.startswith(serve_prefix):
        name = name[len(serve_prefix):]
    name = name.lstrip("/")
    if not name:
        return name
    return posixpath.normpath(name)
