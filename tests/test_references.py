from __future__ import annotations

import dataclasses

import pytest

from docsite.errors import DisallowedLinkTargetError, MalformedDocumentNameError, MissingReferenceError
from docsite.references import is_external
from docsite.render import render_document

NOTION_NAME = "Getting Started 1a2b3c4d5e6f7890abcdef1234567890.md"


def test_markdown_link_is_rewritten_and_reported(config, write_md):
    write_md("FAQ.md")
    doc = render_document("See [the FAQ](FAQ.md).\n", config)
    assert '<a href="FAQ.html">the FAQ</a>' in doc.html
    assert doc.links == ["FAQ.md"]


def test_encoded_spaces_and_content_id(config, write_md):
    write_md(NOTION_NAME)
    doc = render_document("[start](Getting%20Started%201a2b3c4d5e6f7890abcdef1234567890.md)\n", config)
    assert 'href="Getting-Started.html"' in doc.html
    assert doc.links == [NOTION_NAME]


def test_clean_urls_for_website(config, write_md):
    write_md("FAQ.md")
    doc = render_document("[faq](FAQ.md)\n", dataclasses.replace(config, for_website=True))
    assert 'href="FAQ"' in doc.html


def test_links_reported_in_document_order(config, write_md):
    write_md("B.md")
    write_md("A.md")
    doc = render_document("[b](B.md)\n\n- [a](A.md)\n- [b again](B.md)\n", config)
    assert doc.links == ["B.md", "A.md", "B.md"]


def test_external_link_opens_in_new_tab(config):
    doc = render_document("[x](https://example.com/x)\n", config)
    assert 'href="https://example.com/x"' in doc.html
    assert 'target="_blank"' in doc.html
    assert doc.links == []


@pytest.mark.parametrize("uri", ["https://sumatrapdfreader.org/x", "https://www.sumatrapdfreader.org/download"])
def test_own_domain_link_stays_in_tab(config, uri):
    doc = render_document(f"[home]({uri})\n", config)
    assert "target=" not in doc.html


def test_insecure_link_left_alone(config):
    doc = render_document("[old](http://example.com/page)\n", config)
    assert 'href="http://example.com/page"' in doc.html
    assert 'target="_blank"' in doc.html


def test_bare_url_is_autolinked(config):
    doc = render_document("Visit https://example.com/y today\n", config)
    assert 'href="https://example.com/y"' in doc.html
    assert 'target="_blank"' in doc.html


def test_mailto_left_alone(config):
    doc = render_document("[mail](mailto:someone@example.com)\n", config)
    assert 'href="mailto:someone@example.com"' in doc.html


def test_missing_link_target_is_fatal(config):
    with pytest.raises(MissingReferenceError) as exc_info:
        render_document("[gone](missing.md)\n", config, document="Index.md")
    assert exc_info.value.target == "missing.md"
    assert exc_info.value.document == "Index.md"


def test_link_to_other_file_types_is_fatal(config, write_md):
    write_md("notes.txt", "plain")
    with pytest.raises(DisallowedLinkTargetError):
        render_document("[notes](notes.txt)\n", config)


def test_malformed_markdown_name_is_fatal(config, write_md):
    write_md("v1.2 notes.md")
    with pytest.raises(MalformedDocumentNameError):
        render_document("[notes](v1.2%20notes.md)\n", config)


@pytest.mark.parametrize("target", ["img/shot.png", "data.csv", "img/photo.JPG"])
def test_image_and_csv_links_checked_not_rewritten(config, write_md, target):
    write_md(target)
    doc = render_document(f"[file]({target})\n", config)
    assert f'href="{target}"' in doc.html
    assert doc.links == []


def test_untitled_database_link_points_at_csv(config):
    doc = render_document("[db](Untitled%20Database%20abc.md)\n", config)
    assert 'href="Untitled%20Database%20abc.csv"' in doc.html
    assert doc.links == []


def test_local_image_is_checked_and_decoded(config, write_md):
    write_md("img/my shot.png")
    doc = render_document("![shot](img/my%20shot.png)\n", config)
    assert 'src="img/my shot.png"' in doc.html


def test_missing_image_is_fatal(config):
    with pytest.raises(MissingReferenceError):
        render_document("![shot](img/none.png)\n", config)


def test_remote_image_left_alone(config):
    doc = render_document("![logo](https://example.com/logo.png)\n", config)
    assert 'src="https://example.com/logo.png"' in doc.html


def test_is_external():
    assert is_external("https://example.com/x", "sumatrapdfreader.org")
    assert is_external("http://example.com/x", "sumatrapdfreader.org")
    assert not is_external("https://sumatrapdfreader.org/x", "sumatrapdfreader.org")
    assert not is_external("mailto:a@b.c", "sumatrapdfreader.org")
    assert not is_external("FAQ.md", "sumatrapdfreader.org")


def test_unparseable_host_is_external(config):
    doc = render_document("[x](http://[bad/path)\n", config)
    assert 'href="http://[bad/path"' in doc.html
    assert 'target="_blank"' in doc.html
    assert is_external("http://[bad/path", "sumatrapdfreader.org")
