"""Preview server: renders pages on request so edits to the markdown show up on reload."""

from __future__ import annotations

import http.server
import logging
import webbrowser
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from .errors import DocsBuildError
from .naming import normalize_document_name
from .session import BuildSession

logger = logging.getLogger(__name__)


class DocsRequestHandler(http.server.SimpleHTTPRequestHandler):
    """Documents are rendered through the session; anything else comes from the www dir."""

    server: "DocsServer"

    def do_GET(self):
        name = self.server.document_for_path(self.path)
        if name is None:
            super().do_GET()
            return
        try:
            body = self.server.session.get_or_process(name, force=True)
        except DocsBuildError as exc:
            logger.error("failed to render '%s': %s", name, exc)
            self.send_error(500, str(exc))
            return
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class DocsServer(http.server.ThreadingHTTPServer):
    def __init__(self, address, session: BuildSession, www_dir: Path):
        self.session = session
        self.www_dir = www_dir
        super().__init__(address, self._make_handler)

    def _make_handler(self, *args, **kwargs):
        return DocsRequestHandler(*args, directory=str(self.www_dir), **kwargs)

    def document_for_path(self, url_path: str) -> Optional[str]:
        config = self.session.config
        path = unquote(urlparse(url_path).path).lstrip("/")
        if path == "":
            return config.root_document
        if path.endswith(".md"):
            name = normalize_document_name(path, config.serve_prefix)
            if name.startswith("..") or not (config.md_dir / name).is_file():
                return None
            return name
        return self.session.document_for_page(path)


def serve_site(session: BuildSession, port: int = 8000, open_browser: bool = False) -> None:
    www_dir = session.config.www_dir
    if not www_dir.exists():
        print(f"Site directory '{www_dir}' doesn't exist. Build the docs first.")
        return

    with DocsServer(("", port), session, www_dir) as httpd:
        url = f"http://localhost:{httpd.server_address[1]}"
        print(f"Serving docs at {url}")
        print("Press Ctrl+C to stop")

        if open_browser:
            webbrowser.open(url)

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")
