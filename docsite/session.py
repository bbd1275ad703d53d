"""One build run: processed-document cache, work queue and the lock guarding them.

``get_or_process`` may be called from preview server threads; the lock
serializes the whole check-process-store sequence so only one document is
rendered at a time. The work queue is drained by ``build`` alone and is not
meant for concurrent producers.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, Optional, Set

from .config import DocsConfig
from .errors import MissingReferenceError
from .naming import normalize_document_name, page_id
from .page import SearchAssets, assemble_page
from .render import render_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessedDocument:
    name: str
    rendered: bytes


class BuildSession:
    def __init__(self, config: DocsConfig, search: Optional[SearchAssets] = None):
        self.config = config
        self.search = search
        self._records: Dict[str, ProcessedDocument] = {}
        self._queue: Deque[str] = deque()
        self._enqueued: Set[str] = set()
        self._lock = threading.Lock()
        # number of parse/render cycles, cache hits excluded
        self.process_count = 0

    def get_or_process(self, name: str, force: bool = False) -> bytes:
        name = normalize_document_name(name, self.config.serve_prefix)
        logger.debug("get_or_process: '%s', force: %s", name, force)
        with self._lock:
            record = self._records.get(name)
            if record is not None and not force:
                logger.debug("skipping '%s', already processed", name)
                return record.rendered
            record = self._process(name)
            self._records[name] = record
            return record.rendered

    def _process(self, name: str) -> ProcessedDocument:
        path = self.config.md_dir / name
        try:
            source = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise MissingReferenceError(name) from exc
        logger.info("read:  %s size: %d", path, len(source))
        self.process_count += 1

        main_page = name == self.config.root_document
        doc = render_document(source, self.config, main_page=main_page, document=name)
        self._enqueue(doc.links)
        rendered = assemble_page(doc.html, name, self.config, self.search)
        return ProcessedDocument(name=name, rendered=rendered)

    def _enqueue(self, names: Iterable[str]) -> None:
        for name in names:
            if name in self._enqueued or name in self._records:
                continue
            self._enqueued.add(name)
            self._queue.append(name)

    def build(self, root: Optional[str] = None) -> Dict[str, ProcessedDocument]:
        """Process ``root`` and everything reachable from it, breadth first."""
        root = root or self.config.root_document
        self._enqueued.add(normalize_document_name(root, self.config.serve_prefix))
        self.get_or_process(root)
        while self._queue:
            name = self._queue.popleft()
            self.get_or_process(name)
        logger.info("processed %d documents", len(self._records))
        return self.records()

    def records(self) -> Dict[str, ProcessedDocument]:
        with self._lock:
            return dict(self._records)

    def cached(self, name: str) -> Optional[bytes]:
        name = normalize_document_name(name, self.config.serve_prefix)
        with self._lock:
            record = self._records.get(name)
        return record.rendered if record is not None else None

    def document_for_page(self, page: str) -> Optional[str]:
        """Map a page identifier (with or without ``.html``) back to its document."""
        stem = page[: -len(".html")] if page.endswith(".html") else page
        with self._lock:
            names = list(self._records)
        for name in names:
            if page_id(name, html_ext=False) == stem:
                return name
        return None
