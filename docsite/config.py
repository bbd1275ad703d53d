"""Build configuration.

Paths default to the layout of a checkout:

    docs/md/                      markdown sources (+ docs/md/img)
    docs/manual.tmpl.html         standalone page shell
    docs/manual.website.tmpl.html website page shell
    docs/www/                     generated pages
    do/gen_docs.search.{js,html}  search widget
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class DocsConfig:
    docs_dir: Path = field(default_factory=lambda: Path("docs"))
    md_subdir: str = "md"
    www_dir: Path = field(default_factory=lambda: Path("docs") / "www")
    img_subdir: str = "img"

    root_document: str = "SumatraPDF-documentation.md"
    root_title: str = "SumatraPDF documentation"
    search_document: str = "Commands.md"
    search_placeholder: str = "<div>:search:</div>"
    search_js_path: Path = field(default_factory=lambda: Path("do") / "gen_docs.search.js")
    search_html_path: Path = field(default_factory=lambda: Path("do") / "gen_docs.search.html")

    standalone_template: str = "manual.tmpl.html"
    website_template: str = "manual.website.tmpl.html"

    # links to this host (or its subdomains) open in the same tab
    project_domain: str = "sumatrapdfreader.org"
    edit_url: str = "https://github.com/sumatrapdfreader/sumatrapdf/blob/master/docs/md/{name}"
    # preview server requests arrive as "docs-md/<name>.md"
    serve_prefix: str = "docs-md/"

    for_website: bool = False
    website_dir: Optional[Path] = None

    archiver: Optional[Path] = None
    archive_path: Path = field(default_factory=lambda: Path("docs") / "manual.dat")

    @property
    def md_dir(self) -> Path:
        return self.docs_dir / self.md_subdir

    @property
    def html_ext(self) -> bool:
        # website pages are served by a web server that maps clean URLs
        return not self.for_website

    @property
    def template_path(self) -> Path:
        name = self.website_template if self.for_website else self.standalone_template
        return self.docs_dir / name

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "DocsConfig":
        docs_dir: Path = args.docs_dir
        www_dir: Path = args.www_dir if args.www_dir is not None else docs_dir / "www"
        archive: Path = args.archive if args.archive is not None else docs_dir / "manual.dat"
        return cls(
            docs_dir=docs_dir,
            www_dir=www_dir,
            search_js_path=args.search_js,
            search_html_path=args.search_html,
            for_website=args.website,
            website_dir=args.website_dir,
            archiver=args.archiver,
            archive_path=archive,
        )
