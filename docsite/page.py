"""Wrap rendered document HTML in the page shell."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import DocsConfig
from .errors import MissingAssetError
from .naming import page_title

INNER_HTML_TOKEN = "{{InnerHTML}}"
TITLE_TOKEN = "{{Title}}"
EDIT_LINK = '<center><a href="{url}" target="_blank" class="suggest-change">edit</a></center>'


@dataclass(frozen=True)
class SearchAssets:
    js: str
    html: str


def load_search_assets(js_path: Path, html_path: Path) -> SearchAssets:
    try:
        js = js_path.read_text(encoding="utf-8")
        fragment = html_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise MissingAssetError(f"Search asset not found: {exc.filename}") from exc
    return SearchAssets(js=f"<script>{js}</script>", html=fragment)


def load_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise MissingAssetError(f"Page template not found: {path}") from exc


def assemble_page(inner_html: str, name: str, config: DocsConfig, search: Optional[SearchAssets]) -> bytes:
    # every page needs the assets loaded, not only the search page
    if search is None:
        raise MissingAssetError("Search assets must be loaded before pages are assembled")

    body = f'<div class="notion-page">{inner_html}</div>'
    body += "<hr>"
    body += EDIT_LINK.format(url=config.edit_url.format(name=name))

    page = load_template(config.template_path)
    page = page.replace(INNER_HTML_TOKEN, body)
    page = page.replace(TITLE_TOKEN, page_title(name))

    if name == config.search_document:
        page = page.replace(config.search_placeholder, search.html)
        page = page.replace("</body>", search.js + "</body>", 1)
    return page.encode("utf-8")
