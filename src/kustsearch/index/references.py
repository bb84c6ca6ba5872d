"""Discovery of the files a kustomization refers to."""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from kustsearch.config import AppConfig
from kustsearch.errors import ReferenceResolutionError
from kustsearch.models import Document
from kustsearch.parsing.decoder import YamlDecoder
from kustsearch.parsing.schema import KustomizationSchema, fix_pre_decode
from kustsearch.utils.files import is_manifest

LOGGER = logging.getLogger(__name__)

RESOURCE = "resource"
GENERATOR = "generator"
TRANSFORMER = "transformer"


class ReferenceExtractor:
    """Resolves resources, generators and transformers into child documents."""

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

    def read_schema(self, document: Document) -> KustomizationSchema:
        data = self.normalize(document.document_data.encode("utf-8"))
        return KustomizationSchema.from_bytes(data, self.decoder).fix()

    def get_resources(
        self,
        document: Document,
        *,
        include_resources: bool | None = None,
        include_generators: bool | None = None,
        include_transformers: bool | None = None,
    ) -> List[Document]:
        """Return the documents referenced by a kustomization file.

        Resources come first, then generators, then transformers, each in
        file order. Flags left as None fall back to the configuration.
        Anything that is not a kustomization file has no references.
        """
        if not is_manifest(document.file_path, self.config.manifest_names):
            return []

        schema = self.read_schema(document)

        selected = (
            (include_resources, self.config.include_resources, schema.resources, RESOURCE),
            (include_generators, self.config.include_generators, schema.generators, GENERATOR),
            (include_transformers, self.config.include_transformers, schema.transformers, TRANSFORMER),
        )
        documents: List[Document] = []
        for flag, default, paths, file_type in selected:
            enabled = default if flag is None else flag
            if enabled:
                documents.extend(self.collect_documents(document, paths, file_type))
        return documents

    def collect_documents(
        self, document: Document, paths: Sequence[str], file_type: str
    ) -> List[Document]:
        """Resolve each path relative to ``document``, skipping blank and unresolvable ones."""
        documents: List[Document] = []
        for path in paths:
            if not path.strip():
                continue
            try:
                child = document.from_relative_path(path)
            except ReferenceResolutionError as exc:
                LOGGER.warning("Skipping %s %r in %s: %s", file_type, path, document.file_path, exc)
                continue
            child.file_type = file_type
            documents.append(child)
        return documents
