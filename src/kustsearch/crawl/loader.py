"""Loading document content from a local repository checkout."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from kustsearch.errors import NormalizationError
from kustsearch.models import Document
from kustsearch.utils.files import RECOGNIZED_MANIFEST_NAMES, find_manifest_in

LOGGER = logging.getLogger(__name__)


class LocalFileLoader:
    """Reads documents of one repository from a directory on disk."""

    def __init__(
        self,
        root: Path,
        *,
        repository_url: str = "",
        default_branch: str = "",
        manifest_names: Sequence[str] = RECOGNIZED_MANIFEST_NAMES,
    ) -> None:
        self.root = Path(root)
        self.repository_url = repository_url or self.root.resolve().as_uri()
        self.default_branch = default_branch
        self.manifest_names = tuple(manifest_names)

    def owns(self, document: Document) -> bool:
        return document.repository_url == self.repository_url

    def document_for(self, path: Path) -> Document:
        """Build an empty document for a path inside the checkout."""
        relative = Path(path).resolve().relative_to(self.root.resolve())
        return Document(
            file_path=relative.as_posix(),
            repository_url=self.repository_url,
            default_branch=self.default_branch,
        )

    def load(self, document: Document) -> Document:
        """Return a copy of ``document`` with its content read from disk.

        A path naming a directory resolves to the kustomization file inside it.

        Raises:
            FileNotFoundError: if neither a file nor a kustomization
                directory exists at the path.
            NormalizationError: if the file is not UTF-8 text.
        """
        path = self.root / document.file_path
        loaded = document.copy()
        if path.is_dir():
            manifest = find_manifest_in(path, self.manifest_names)
            if manifest is None:
                raise FileNotFoundError(f"No kustomization file in {path}")
            path = manifest
            loaded.file_path = manifest.relative_to(self.root).as_posix()
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        LOGGER.debug("Loading %s", path)
        try:
            loaded.document_data = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise NormalizationError(f"{path} is not UTF-8 text: {exc}") from exc
        loaded.creation_time = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        return loaded
