"""Utility helpers for recognizing and finding kustomization files."""

from __future__ import annotations

import posixpath
from pathlib import Path, PurePath
from typing import Iterable, Iterator, Sequence

RECOGNIZED_MANIFEST_NAMES: tuple[str, ...] = (
    "kustomization.yaml",
    "kustomization.yml",
    "Kustomization",
)

YAML_SUFFIXES = (".yaml", ".yml")


def is_manifest(path: str | PurePath, names: Sequence[str] = RECOGNIZED_MANIFEST_NAMES) -> bool:
    """Return True if the base name of ``path`` is a recognized kustomization file name."""
    return posixpath.basename(PurePath(path).as_posix()) in names


def iter_manifest_paths(
    inputs: Iterable[Path], names: Sequence[str] = RECOGNIZED_MANIFEST_NAMES
) -> Iterator[Path]:
    """Yield kustomization file paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_manifest_paths(
                sorted(child for child in item.rglob("*") if child.name in names), names
            )
        elif item.is_file() and is_manifest(item, names):
            yield item


def iter_yaml_paths(
    inputs: Iterable[Path], names: Sequence[str] = RECOGNIZED_MANIFEST_NAMES
) -> Iterator[Path]:
    """Yield YAML and kustomization file paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_yaml_paths(
                sorted(child for child in item.rglob("*") if child.is_file()), names
            )
        elif item.is_file() and (item.suffix.lower() in YAML_SUFFIXES or is_manifest(item, names)):
            yield item


def find_manifest_in(directory: Path, names: Sequence[str] = RECOGNIZED_MANIFEST_NAMES) -> Path | None:
    """Return the first recognized kustomization file inside ``directory``."""
    for name in names:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None
