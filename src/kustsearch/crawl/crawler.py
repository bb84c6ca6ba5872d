"""Breadth-first crawl of kustomizations and the files they reference."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Sequence, Set, Tuple

from kustsearch.crawl.loader import LocalFileLoader
from kustsearch.errors import KustSearchError
from kustsearch.index.parser import ManifestParser
from kustsearch.index.references import ReferenceExtractor
from kustsearch.models import Document, IndexedDocument

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CrawlStats:
    parsed: int = 0
    failed: int = 0
    missing: int = 0
    remote: int = 0
    processed_files: list[str] = field(default_factory=list)

    def increment(self, status: str, path: str) -> None:
        if status == "parsed":
            self.parsed += 1
        elif status == "missing":
            self.missing += 1
        elif status == "remote":
            self.remote += 1
        else:
            self.failed += 1
        self.processed_files.append(path)


class Crawler:
    """Coordinates loading, parsing and reference discovery."""

    def __init__(
        self,
        loader: LocalFileLoader,
        parser: ManifestParser,
        extractor: ReferenceExtractor,
        *,
        max_documents: int = 1000,
    ) -> None:
        self.loader = loader
        self.parser = parser
        self.extractor = extractor
        self.max_documents = max_documents

    def crawl(
        self,
        seeds: Sequence[Document],
        *,
        sink: Callable[[IndexedDocument], None] | None = None,
    ) -> CrawlStats:
        """Parse the seeds and everything reachable from them.

        Each document is visited once. Remote references are reported to
        ``sink`` without content; documents that fail to parse are reported
        without derived fields.
        """
        stats = CrawlStats()
        pending: Deque[Document] = deque(seeds)
        seen: Set[Tuple[str, str]] = set()

        while pending and len(stats.processed_files) < self.max_documents:
            document = pending.popleft()
            key = (document.repository_url, document.file_path)
            if key in seen:
                continue
            seen.add(key)

            if not self.loader.owns(document):
                LOGGER.info("Not fetching remote %s", document.repository_url)
                stats.increment("remote", document.repository_url)
                if sink is not None:
                    sink(IndexedDocument.from_document(document))
                continue

            try:
                loaded = self.loader.load(document)
            except OSError as e:
                LOGGER.warning(f"Cannot read {document.file_path}: {e}")
                stats.increment("missing", document.file_path)
                continue
            except KustSearchError as e:
                LOGGER.error(f"Failed to load {document.file_path}: {e}")
                stats.increment("failed", document.file_path)
                continue
            # Directories resolve to their kustomization file, which may have been visited.
            loaded_key = (loaded.repository_url, loaded.file_path)
            if loaded_key != key and loaded_key in seen:
                continue
            seen.add(loaded_key)

            record = IndexedDocument.from_document(loaded)
            try:
                LOGGER.info(f"Processing: {record.file_path}")
                self.parser.populate(record)
            except KustSearchError as e:
                LOGGER.error(f"Failed to parse {record.file_path}: {e}")
                stats.increment("failed", record.file_path)
            else:
                stats.increment("parsed", record.file_path)
                try:
                    pending.extend(self.extractor.get_resources(record))
                except KustSearchError as e:
                    LOGGER.error(f"Failed to read references of {record.file_path}: {e}")

            if sink is not None:
                sink(record)

        left = {(d.repository_url, d.file_path) for d in pending} - seen
        if left and len(stats.processed_files) >= self.max_documents:
            LOGGER.warning("Stopped after %d documents, %d left", self.max_documents, len(left))
        return stats
