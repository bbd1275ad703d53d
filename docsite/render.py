"""Markdown -> inner page HTML.

Node overrides on top of Python-Markdown's default rendering, first match
wins:

- the first level-1 heading is dropped on the main page and turned into a
  breadcrumb everywhere else
- fenced code tagged ``commands`` holds CSV and renders as a table
- ``:columns`` containers (see :mod:`docsite.columns`)
- paragraphs use a ``div`` tag
"""

from __future__ import annotations

import csv
import html
import io
import logging
import re
import xml.etree.ElementTree as etree
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE

from .columns import ColumnsExtension
from .config import DocsConfig
from .naming import page_id
from .references import ReferenceExtension

logger = logging.getLogger(__name__)

COMMANDS_INFO = "commands"

_COMMANDS_BLOCK_RE = re.compile(
    r"(?P<fence>^(?:~{3,}|`{3,}))[ ]*" + COMMANDS_INFO + r"[ ]*\n"
    r"(?P<code>.*?)(?<=\n)"
    r"(?P=fence)[ ]*$",
    re.MULTILINE | re.DOTALL,
)
_LEADING_TAG_RE = re.compile(r"^\</?([^ >]+)")

# heading ids, strikethrough, bare URL autolinks and smart typography
MARKDOWN_EXTENSIONS = [
    "tables",
    "fenced_code",
    "toc",
    "smarty",
    "pymdownx.smartsymbols",
    "pymdownx.tilde",
    "pymdownx.magiclink",
]

MARKDOWN_EXTENSION_CONFIGS = {
    # fraction glyphs only; quotes and dashes come from smarty
    "pymdownx.smartsymbols": {
        "fractions": True,
        "trademark": False,
        "copyright": False,
        "registered": False,
        "care_of": False,
        "plusminus": False,
        "arrows": False,
        "notequal": False,
        "ordinal_numbers": False,
    },
    # ~~strike~~ only, a single ~ stays literal
    "pymdownx.tilde": {"subscript": False},
}


def csv_table_html(records: List[List[str]], no_header: bool = False) -> str:
    """Render CSV rows as a table; the first two columns of body rows are code."""
    if not records:
        return ""
    lines = ['<table class="collection-content">']
    if not no_header:
        header, records = records[0], records[1:]
        lines += ["<thead>", "<tr>"]
        for cell in header:
            lines.append(f"<th>{html.escape(cell.strip(), quote=False)}</th>")
        lines += ["</tr>", "</thead>"]

    lines.append("<tbody>")
    for row in records:
        lines.append("<tr>")
        for i, cell in enumerate(row):
            cell = cell.strip()
            if not cell:
                lines += ["<td>", "</td>"]
                continue
            cell = html.escape(cell, quote=False)
            lines.append("<td>")
            if i in (0, 1):
                # key combinations like "Ctrl + W, Ctrl + F4" stay in one code span
                lines.append(f"<code>{cell}</code>")
            else:
                lines.append(cell)
            lines.append("</td>")
        lines.append("</tr>")
    lines += ["</tbody>", "</table>"]
    return "\n".join(lines)


def commands_table_html(content: str) -> str:
    records = list(csv.reader(io.StringIO(content.strip())))
    return csv_table_html(records)


class CommandsBlockPreprocessor(Preprocessor):
    """Swap ```commands fences for a stashed table before fenced_code sees them."""

    def run(self, lines):
        text = "\n".join(lines)
        while True:
            m = _COMMANDS_BLOCK_RE.search(text)
            if m is None:
                break
            placeholder = self.md.htmlStash.store(commands_table_html(m.group("code")))
            text = f"{text[:m.start()]}\n{placeholder}\n{text[m.end():]}"
        return text.split("\n")


class PageHooksTreeprocessor(Treeprocessor):
    def __init__(self, md, main_page: bool, home_href: str, home_title: str):
        super().__init__(md)
        self.main_page = main_page
        self.home_href = home_href
        self.home_title = home_title

    def run(self, root):
        self.render_first_h1(root)
        self.render_paragraphs(root)

    def render_first_h1(self, root: etree.Element) -> None:
        parents: Dict[etree.Element, etree.Element] = {c: p for p in root.iter() for c in p}
        h1: Optional[etree.Element] = next(root.iter("h1"), None)
        if h1 is None:
            return
        parent = parents[h1]
        if self.main_page:
            # the page shell supplies the title
            parent.remove(h1)
            return
        crumbs = self.breadcrumbs(h1)
        parent[list(parent).index(h1)] = crumbs

    def breadcrumbs(self, h1: etree.Element) -> etree.Element:
        crumbs = etree.Element("div", {"class": "breadcrumbs"})
        home = etree.SubElement(crumbs, "div")
        link = etree.SubElement(home, "a", {"href": self.home_href})
        link.text = self.home_title
        sep = etree.SubElement(crumbs, "div")
        sep.text = "/"
        current = etree.SubElement(crumbs, "div")
        current.text = h1.text
        for child in list(h1):
            current.append(child)
        crumbs.tail = h1.tail
        return crumbs

    def render_paragraphs(self, root: etree.Element) -> None:
        for p in root.iter("p"):
            text = (p.text or "").strip()
            m = HTML_PLACEHOLDER_RE.fullmatch(text) if len(p) == 0 else None
            # block-level stashed html is unwrapped from <p> by the raw html postprocessor
            if m is not None and self.stashed_block_level(int(m.group(1))):
                continue
            p.tag = "div"

    def stashed_block_level(self, index: int) -> bool:
        stashed = self.md.htmlStash.rawHtmlBlocks[index]
        if not isinstance(stashed, str):
            return self.md.is_block_level(stashed.tag)
        m = _LEADING_TAG_RE.match(stashed)
        if m is None:
            return False
        tag = m.group(1)
        return tag[0] in "!?@%" or self.md.is_block_level(tag)


class PageHooksExtension(Extension):
    def __init__(self, **kwargs):
        self.config = {
            "main_page": [False, "Drop the first h1 instead of rendering breadcrumbs"],
            "home_href": ["", "Breadcrumb link to the documentation home page"],
            "home_title": ["", "Breadcrumb link text"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.preprocessors.register(CommandsBlockPreprocessor(md), "doc_commands", 28)
        hooks = PageHooksTreeprocessor(
            md,
            main_page=self.getConfig("main_page"),
            home_href=self.getConfig("home_href"),
            home_title=self.getConfig("home_title"),
        )
        # after inline (20) and reference resolution (15)
        md.treeprocessors.register(hooks, "doc_page_hooks", 12)


@dataclass
class RenderedDocument:
    html: str
    # markdown documents linked from this one, in document order
    links: List[str] = field(default_factory=list)


def new_markdown(config: DocsConfig, main_page: bool, document: str = "") -> markdown.Markdown:
    """A fresh parser/renderer for one document."""
    return markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS
        + [
            ColumnsExtension(),
            ReferenceExtension(
                docs_root=str(config.md_dir),
                project_domain=config.project_domain,
                html_ext=config.html_ext,
                document=document,
            ),
            PageHooksExtension(
                main_page=main_page,
                home_href=page_id(config.root_document, config.html_ext),
                home_title=config.root_title,
            ),
        ],
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )


def render_document(source: str, config: DocsConfig, main_page: bool = False, document: str = "") -> RenderedDocument:
    md = new_markdown(config, main_page, document)
    inner_html = md.convert(source)
    links = list(md.doc_references.discovered)
    logger.debug("rendered '%s': %d bytes, %d links", document, len(inner_html), len(links))
    return RenderedDocument(html=inner_html, links=links)
