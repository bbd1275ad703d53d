from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from docsite.config import DocsConfig
from docsite.page import SearchAssets, load_search_assets

ROOT_DOC = "SumatraPDF-documentation.md"

STANDALONE_TEMPLATE = """<!doctype html>
<html>
<head><title>{{Title}}</title></head>
<body>
{{InnerHTML}}
</body>
</html>
"""

WEBSITE_TEMPLATE = """<!doctype html>
<html>
<head><title>{{Title}} - SumatraPDF website</title></head>
<body class="website">
{{InnerHTML}}
</body>
</html>
"""

SEARCH_JS = "function doSearch() { return 1; }"
SEARCH_HTML = '<input id="search-input" type="text">'


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    docs = tmp_path / "docs"
    (docs / "md" / "img").mkdir(parents=True)
    (docs / "manual.tmpl.html").write_text(STANDALONE_TEMPLATE, encoding="utf-8")
    (docs / "manual.website.tmpl.html").write_text(WEBSITE_TEMPLATE, encoding="utf-8")
    do = tmp_path / "do"
    do.mkdir()
    (do / "gen_docs.search.js").write_text(SEARCH_JS, encoding="utf-8")
    (do / "gen_docs.search.html").write_text(SEARCH_HTML, encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(project_dir: Path) -> DocsConfig:
    docs = project_dir / "docs"
    return DocsConfig(
        docs_dir=docs,
        www_dir=docs / "www",
        search_js_path=project_dir / "do" / "gen_docs.search.js",
        search_html_path=project_dir / "do" / "gen_docs.search.html",
        archive_path=docs / "manual.dat",
    )


@pytest.fixture
def search(config: DocsConfig) -> SearchAssets:
    return load_search_assets(config.search_js_path, config.search_html_path)


@pytest.fixture
def write_md(config: DocsConfig) -> Callable[[str, str], Path]:
    """Create a file under the markdown root; returns its path."""

    def _write(name: str, text: str = "") -> Path:
        path = config.md_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
