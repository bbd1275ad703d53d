"""
Generate HTML documentation from the markdown sources in docs/md.

Starts at the root document and follows links, so only pages reachable from
it are generated. A link to a missing file stops the build.

Usage:
  gen-docs                                   # docs/www + optional archive
  gen-docs --archiver bin/MakeLZSA.exe       # also pack docs/www into docs/manual.dat
  gen-docs --website --website-dir ../sumatra-website --www-dir ../sumatra-website/www/docs
  gen-docs --serve --port 8000 --open        # build, then preview with live re-rendering
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from .config import DocsConfig
from .errors import DocsBuildError
from .output import make_archive, print_summary, sync_website_checkout, write_output
from .page import load_search_assets
from .serve import serve_site
from .session import BuildSession

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate HTML documentation from interlinked markdown files.")
    parser.add_argument("--docs-dir", type=Path, default=Path("docs"), help="Docs folder holding md/ and the page templates (default: docs)")
    parser.add_argument("--www-dir", type=Path, default=None, help="Output folder (default: <docs-dir>/www)")
    parser.add_argument("--search-js", type=Path, default=Path("do") / "gen_docs.search.js", help="Search widget script")
    parser.add_argument("--search-html", type=Path, default=Path("do") / "gen_docs.search.html", help="Search widget HTML fragment")
    parser.add_argument("--website", action="store_true", help="Generate for the website: clean URLs and website template")
    parser.add_argument("--website-dir", type=Path, default=None, help="Website checkout to 'git pull' before generating (with --website)")
    parser.add_argument("--archiver", type=Path, default=None, help="Executable called as '<archiver> <archive> <www-dir>'")
    parser.add_argument("--archive", type=Path, default=None, help="Archive path (default: <docs-dir>/manual.dat)")
    parser.add_argument("--serve", action="store_true", help="Serve the generated docs after building")
    parser.add_argument("--port", type=int, default=8000, help="Port for --serve (default: 8000)")
    parser.add_argument("--open", action="store_true", help="Open a browser with --serve")
    parser.add_argument("-v", "--verbose", action="store_true", help="Trace every link and image")
    return parser.parse_args(argv)


def gen_docs(config: DocsConfig) -> BuildSession:
    time_start = time.monotonic()
    if config.for_website:
        logger.info("generating docs for website")
        sync_website_checkout(config.website_dir)
    search = load_search_assets(config.search_js_path, config.search_html_path)

    session = BuildSession(config, search)
    records = session.build()
    write_output(records, config)

    archive_size = None
    if config.archiver is not None and not config.for_website:
        archive_size = make_archive(config.archiver, config.archive_path, config.www_dir)
    print_summary(config, archive_size)
    logger.info("gen_docs finished in %.2fs", time.monotonic() - time_start)
    return session


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )
    config = DocsConfig.from_args(args)
    try:
        session = gen_docs(config)
    except DocsBuildError as exc:
        raise SystemExit(str(exc)) from exc

    if args.serve:
        serve_site(session, port=args.port, open_browser=args.open)


if __name__ == "__main__":
    main()
