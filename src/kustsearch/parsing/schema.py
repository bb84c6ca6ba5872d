"""Kustomization schema and the fix-ups applied around decoding."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml

from kustsearch.errors import NormalizationError, SingleDecodeError
from kustsearch.parsing.decoder import YamlDecoder

LOGGER = logging.getLogger(__name__)

KUSTOMIZATION_KIND = "Kustomization"
KUSTOMIZATION_API_VERSION = "kustomize.config.k8s.io/v1beta1"

DEPRECATED_FIELDS = {
    "imageTags:": "images:",
}


def _uses_legacy_patches(data: bytes) -> bool:
    try:
        document = yaml.safe_load(data)
    except (yaml.YAMLError, RecursionError) as exc:
        LOGGER.debug("Skipping legacy patch check: %s", exc)
        return False
    if not isinstance(document, dict):
        return False
    patches = document.get("patches")
    return isinstance(patches, list) and bool(patches) and all(
        isinstance(patch, str) for patch in patches
    )


def ensure_utf8(data: bytes) -> bytes:
    """Check that content is UTF-8 text, for any file about to be decoded."""
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise NormalizationError(f"could not fix kustomize file: {exc}") from exc
    return data


def fix_pre_decode(data: bytes) -> bytes:
    """Rewrite deprecated kustomization fields before decoding.

    Only applies to kustomization files. Only content that is not valid
    UTF-8 is an error; YAML problems are left for the decoder to report.
    """
    text = ensure_utf8(data).decode("utf-8")

    for old, new in DEPRECATED_FIELDS.items():
        text = text.replace(old, new)

    fixed = text.encode("utf-8")
    if _uses_legacy_patches(fixed):
        fixed = re.sub(rb"(?m)^patches:", b"patchesStrategicMerge:", fixed)
    return fixed


def _string_list(document: Dict[str, Any], name: str) -> List[str]:
    value = document.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SingleDecodeError(
            f"could not parse kustomization: {name} must be a list, got {type(value).__name__}"
        )
    entries: List[str] = []
    for entry in value:
        if not isinstance(entry, str):
            raise SingleDecodeError(
                f"could not parse kustomization: {name} entries must be strings, got {entry!r}"
            )
        entries.append(entry)
    return entries


@dataclass(slots=True)
class KustomizationSchema:
    """The parts of a kustomization that reference other files."""

    kind: str = ""
    api_version: str = ""
    resources: List[str] = field(default_factory=list)
    bases: List[str] = field(default_factory=list)
    generators: List[str] = field(default_factory=list)
    transformers: List[str] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes, decoder: YamlDecoder) -> "KustomizationSchema":
        document = decoder.load_one(data)
        kind = document.get("kind") or ""
        api_version = document.get("apiVersion") or ""
        if not isinstance(kind, str) or not isinstance(api_version, str):
            raise SingleDecodeError("could not parse kustomization: kind and apiVersion must be strings")
        return cls(
            kind=kind,
            api_version=api_version,
            resources=_string_list(document, "resources"),
            bases=_string_list(document, "bases"),
            generators=_string_list(document, "generators"),
            transformers=_string_list(document, "transformers"),
        )

    def fix(self) -> "KustomizationSchema":
        """Apply defaults and fold deprecated ``bases`` into ``resources``."""
        if not self.kind:
            self.kind = KUSTOMIZATION_KIND
        if not self.api_version:
            self.api_version = KUSTOMIZATION_API_VERSION
        self.resources.extend(self.bases)
        self.bases = []
        return self
