"""Parsing of kustomization and resource files into indexed documents."""

from __future__ import annotations

import logging
from typing import Callable, List, Set

from kustsearch.config import AppConfig
from kustsearch.index.flatten import flatten
from kustsearch.models import Document, IndexedDocument
from kustsearch.parsing.decoder import YamlDecoder
from kustsearch.parsing.nodes import MappingNode, ScalarNode
from kustsearch.parsing.schema import ensure_utf8, fix_pre_decode
from kustsearch.utils.files import is_manifest

LOGGER = logging.getLogger(__name__)


class ManifestParser:
    """Derives kinds, identifiers and values from document content."""

    def __init__(
        self,
        decoder: YamlDecoder,
        config: AppConfig | None = None,
        *,
        normalize: Callable[[bytes], bytes] = fix_pre_decode,
    ) -> None:
        self.decoder = decoder
        self.config = config or AppConfig()
        self.normalize = normalize

    def is_manifest(self, path: str) -> bool:
        return is_manifest(path, self.config.manifest_names)

    def get_kind(self, mapping: MappingNode) -> str:
        kind = mapping.get("kind")
        if isinstance(kind, ScalarNode) and kind.is_string and kind.text:
            return kind.text
        return self.config.default_kind

    def read_mappings(self, document: Document) -> List[MappingNode]:
        """Decode a document: one mapping for a kustomization file, a stream otherwise.

        Deprecated field fix-ups only apply to kustomization files; resource
        content is indexed as written.
        """
        data = document.document_data.encode("utf-8")
        if self.is_manifest(document.file_path):
            return [self.decoder.decode_one(self.normalize(data))]
        return self.decoder.decode_many(ensure_utf8(data))

    def populate(self, record: IndexedDocument) -> IndexedDocument:
        """Set the kinds, identifiers and values of ``record`` from its content.

        The fields are only assigned once decoding has succeeded; on error
        they are left empty.
        """
        record.kinds, record.identifiers, record.values = [], [], []

        mappings = self.read_mappings(record)

        kinds: Set[str] = set()
        identifiers: Set[str] = set()
        values: Set[str] = set()
        for mapping in mappings:
            kinds.add(self.get_kind(mapping))
            flatten(mapping, identifiers, values)

        # Sorted output keeps unchanged files from being re-indexed.
        record.kinds = sorted(kinds)
        record.identifiers = sorted(identifiers)
        record.values = sorted(values)
        LOGGER.debug("Parsed %s", record)
        return record

    def parse(self, document: Document) -> IndexedDocument:
        return self.populate(IndexedDocument.from_document(document))
