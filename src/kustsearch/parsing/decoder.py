"""YAML decoding for kustomization and resource files."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import yaml

from kustsearch.errors import MultiDecodeError, SingleDecodeError
from kustsearch.parsing.nodes import MappingNode, to_node

LOGGER = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _Loader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as plain strings."""


_Loader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _is_list_kind(document: Dict[str, Any]) -> bool:
    kind = document.get("kind")
    return isinstance(kind, str) and kind.endswith("List") and "items" in document


def _to_mapping(document: Dict[str, Any], index: int) -> MappingNode:
    try:
        return to_node(document)  # type: ignore[return-value]
    except (ValueError, RecursionError) as exc:
        raise MultiDecodeError(f"unable to parse resource: document {index}: {exc}") from exc


class YamlDecoder:
    """Decodes raw bytes into mappings.

    One instance can be shared by a parser and a reference extractor; it
    holds no state between calls.
    """

    def load_one(self, data: bytes) -> Dict[str, Any]:
        """Decode content holding exactly one mapping into a plain dict.

        Empty content decodes as an empty mapping.
        """
        try:
            document = yaml.load(data, Loader=_Loader)
        except (yaml.YAMLError, RecursionError) as exc:
            raise SingleDecodeError(f"unable to parse kustomization: {exc}") from exc

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise SingleDecodeError(
                f"unable to parse kustomization: expected a mapping, got {type(document).__name__}"
            )
        return document

    def decode_one(self, data: bytes) -> MappingNode:
        document = self.load_one(data)
        try:
            return to_node(document)  # type: ignore[return-value]
        except (ValueError, RecursionError) as exc:
            raise SingleDecodeError(f"unable to parse kustomization: {exc}") from exc

    def decode_many(self, data: bytes) -> List[MappingNode]:
        """Decode a stream of zero or more mappings.

        Empty documents are skipped and ``*List`` documents are expanded into
        their items.
        """
        try:
            documents = list(yaml.load_all(data, Loader=_Loader))
        except (yaml.YAMLError, RecursionError) as exc:
            raise MultiDecodeError(f"unable to parse resource: {exc}") from exc

        mappings: List[MappingNode] = []
        for index, document in enumerate(documents):
            if document is None:
                continue
            if not isinstance(document, dict):
                raise MultiDecodeError(
                    f"unable to parse resource: document {index} is a "
                    f"{type(document).__name__}, not a mapping"
                )
            if _is_list_kind(document):
                items = document["items"] or []
                if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                    raise MultiDecodeError(
                        f"unable to parse resource: items of document {index} are not mappings"
                    )
                LOGGER.debug("Expanding %s with %d items", document["kind"], len(items))
                mappings.extend(_to_mapping(item, index) for item in items)
                continue
            mappings.append(_to_mapping(document, index))
        return mappings
