"""``:columns`` blocks.

A line consisting of ``:columns`` opens a container and the next ``:columns``
closes it. The text in between is ordinary markdown rendered inside
``<div class="doc-columns">``::

    :columns
    left text

    right text
    :columns

Without a closing sentinel the block is left alone and renders as text.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as etree

from markdown.blockprocessors import BlockProcessor
from markdown.extensions import Extension

SENTINEL = ":columns"
COLUMNS_CLASS = "doc-columns"

_CLOSE_RE = re.compile(re.escape(SENTINEL) + r"(?:\n|$)")


class ColumnsProcessor(BlockProcessor):
    def test(self, parent, block):
        return block.split("\n", 1)[0] == SENTINEL

    def run(self, parent, blocks):
        text = "\n\n".join(blocks)
        body = text[len(SENTINEL) + 1:]
        m = _CLOSE_RE.search(body)
        if m is None:
            # leave blocks untouched so the paragraph processor picks them up
            return False
        inner = body[: m.start()].strip("\n")
        rest = body[m.end():].lstrip("\n")

        div = etree.SubElement(parent, "div")
        div.set("class", COLUMNS_CLASS)
        self.parser.parseChunk(div, inner)

        blocks[:] = [b for b in rest.split("\n\n") if b] if rest else []
        return True


class ColumnsExtension(Extension):
    def extendMarkdown(self, md):
        # ahead of every built-in block processor
        md.parser.blockprocessors.register(ColumnsProcessor(md.parser), "doc_columns", 105)
