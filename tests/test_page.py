from __future__ import annotations

import dataclasses

import pytest

from docsite.errors import MissingAssetError
from docsite.page import assemble_page, load_search_assets

from .conftest import SEARCH_HTML, SEARCH_JS


def test_assemble_page(config, search):
    page = assemble_page("<div>body</div>", "Keyboard shortcuts.md", config, search).decode("utf-8")
    assert "<title>Keyboard shortcuts</title>" in page
    assert '<div class="notion-page"><div>body</div></div><hr>' in page
    assert (
        '<a href="https://github.com/sumatrapdfreader/sumatrapdf/blob/master/docs/md/Keyboard shortcuts.md"'
        ' target="_blank" class="suggest-change">edit</a>'
    ) in page
    assert "{{" not in page
    assert SEARCH_JS not in page


def test_website_template(config, search):
    website = dataclasses.replace(config, for_website=True)
    page = assemble_page("x", "FAQ.md", website, search).decode("utf-8")
    assert '<body class="website">' in page
    assert "<title>FAQ - SumatraPDF website</title>" in page


def test_search_document_gets_widget(config, search):
    page = assemble_page("<div>:search:</div>", "Commands.md", config, search).decode("utf-8")
    assert SEARCH_HTML in page
    assert page.count("<script>") == 1
    assert page.index("<script>") < page.index("</body>")


def test_missing_search_assets(config):
    with pytest.raises(MissingAssetError):
        assemble_page("x", "FAQ.md", config, None)


def test_missing_template(config, search):
    config.template_path.unlink()
    with pytest.raises(MissingAssetError):
        assemble_page("x", "FAQ.md", config, search)


def test_load_search_assets(config, tmp_path):
    assets = load_search_assets(config.search_js_path, config.search_html_path)
    assert assets.js == f"<script>{SEARCH_JS}</script>"
    assert assets.html == SEARCH_HTML
    with pytest.raises(MissingAssetError):
        load_search_assets(tmp_path / "nope.js", config.search_html_path)
