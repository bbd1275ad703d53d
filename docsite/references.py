"""Validate and rewrite link and image destinations of a parsed document.

Every local file a document references must exist; a build with broken links
is aborted. Links to other markdown documents are rewritten to their generated
page and collected in ``discovered`` so the build can process them next.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as etree
from pathlib import Path
from typing import List
from urllib.parse import urlparse

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import AMP_SUBSTITUTE

from .errors import DisallowedLinkTargetError, MissingReferenceError
from .naming import file_ext, normalize_document_name, page_id

logger = logging.getLogger(__name__)

IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"}
CSV_EXT = ".csv"
MD_EXT = ".md"
# notion exports database views as csv next to a stub .md
UNTITLED_DATABASE_PREFIX = "Untitled Database"


def decode_spaces(uri: str) -> str:
    return uri.replace("%20", " ")


def is_external(uri: str, project_domain: str) -> bool:
    if not (uri.startswith("https://") or uri.startswith("http://")):
        return False
    try:
        host = (urlparse(uri).hostname or "").lower()
    except ValueError:
        # e.g. "http://[bad/path"; an unparseable host is not the project's
        return True
    domain = project_domain.lower()
    return not (host == domain or host.endswith("." + domain))


class ReferenceResolver(Treeprocessor):
    def __init__(self, md, docs_root: Path, project_domain: str, html_ext: bool, document: str = ""):
        super().__init__(md)
        self.docs_root = docs_root
        self.project_domain = project_domain
        self.html_ext = html_ext
        self.document = document
        self.discovered: List[str] = []

    def run(self, root):
        self.discovered = []
        # iter() is document order, each element visited once
        for el in root.iter():
            if el.tag == "img":
                self.resolve_image(el)
            elif el.tag == "a":
                self.resolve_link(el)

    def check_exists(self, file_name: str) -> None:
        if not (self.docs_root / file_name).is_file():
            raise MissingReferenceError(file_name, self.document)

    def resolve_image(self, img: etree.Element) -> None:
        uri = img.get("src", "")
        if uri.startswith("https://"):
            return
        logger.debug("  img src:   %s", uri)
        file_name = decode_spaces(uri)
        self.check_exists(file_name)
        img.set("src", file_name)

    def resolve_link(self, link: etree.Element) -> None:
        uri = link.get("href")
        if uri is None:
            return
        if is_external(uri, self.project_domain):
            link.set("target", "_blank")
        if uri.startswith("https://"):
            return
        # TODO: upgrade http:// links to https:// once the linked sites are checked
        if uri.startswith("http://"):
            return
        # automail links come out of the inline parser entity-obfuscated
        if uri.startswith("mailto:") or uri.startswith(AMP_SUBSTITUTE):
            return

        logger.debug("  link href: %s", uri)
        file_name = decode_spaces(uri)
        if file_name.startswith(UNTITLED_DATABASE_PREFIX):
            link.set("href", uri.replace(MD_EXT, CSV_EXT))
            return

        self.check_exists(file_name)
        ext = file_ext(file_name)
        if ext in IMAGE_EXTS or ext == CSV_EXT:
            return
        if ext != MD_EXT:
            raise DisallowedLinkTargetError(file_name, self.document)
        name = normalize_document_name(file_name)
        link.set("href", page_id(name, self.html_ext))
        self.discovered.append(name)
        logger.debug("  md link:   %s -> %s", name, link.get("href"))


class ReferenceExtension(Extension):
    def __init__(self, **kwargs):
        self.config = {
            "docs_root": ["", "Directory that link and image paths are relative to"],
            "project_domain": ["", "Links to this domain open in the same tab"],
            "html_ext": [True, "Append .html to rewritten markdown links"],
            "document": ["", "Name of the document being resolved, for error messages"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        resolver = ReferenceResolver(
            md,
            docs_root=Path(self.getConfig("docs_root")),
            project_domain=self.getConfig("project_domain"),
            html_ext=self.getConfig("html_ext"),
            document=self.getConfig("document"),
        )
        md.doc_references = resolver
        # after inline patterns (20) have produced <a>/<img>, before page hooks (12)
        md.treeprocessors.register(resolver, "doc_references", 15)
