"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass

from kustsearch.parsing.schema import KUSTOMIZATION_KIND
from kustsearch.utils.files import RECOGNIZED_MANIFEST_NAMES


@dataclass(slots=True)
class AppConfig:
    manifest_names: tuple[str, ...] = RECOGNIZED_MANIFEST_NAMES
    default_kind: str = KUSTOMIZATION_KIND
    include_resources: bool = True
    include_generators: bool = True
    include_transformers: bool = True
    max_documents: int = 1000

    def __post_init__(self) -> None:
        self.manifest_names = tuple(self.manifest_names)
        if not self.manifest_names:
            raise ValueError("At least one manifest file name is required")
        if self.max_documents < 1:
            raise ValueError("max_documents must be positive")
