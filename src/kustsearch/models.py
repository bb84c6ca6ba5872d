"""Core kustsearch data models."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from kustsearch.errors import ReferenceResolutionError

REMOTE_PREFIXES = ("https://", "http://", "ssh://", "git@", "github.com/")


def _split_remote(reference: str) -> Tuple[str, str, str]:
    """Split a remote reference into (repository URL, file path, ref)."""
    base, _, query = reference.partition("?")
    ref = ""
    for pair in query.split("&"):
        key, _, value = pair.partition("=")
        if key in ("ref", "version"):
            ref = value

    if base.startswith("git@"):
        base = "https://" + base[len("git@"):].replace(":", "/", 1)
    scheme, sep, rest = base.partition("://")
    if not sep:
        scheme, rest = "https", base

    host, _, remainder = rest.partition("/")
    if "//" in remainder:
        repo, _, subpath = remainder.partition("//")
    elif host == "github.com":
        segments = remainder.split("/")
        repo, subpath = "/".join(segments[:2]), "/".join(segments[2:])
    else:
        repo, subpath = remainder, ""

    repo = repo.strip("/")
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not host or not repo:
        raise ReferenceResolutionError(f"invalid remote reference: {reference!r}")
    return f"{scheme}://{host}/{repo}", subpath.strip("/"), ref


def is_remote(path: str) -> bool:
    return path.startswith(REMOTE_PREFIXES)


@dataclass(slots=True)
class Document:
    """A file in a repository, as seen by the crawler."""

    file_path: str = ""
    repository_url: str = ""
    document_data: str = ""
    default_branch: str = ""
    creation_time: Optional[datetime] = None
    is_same: bool = False
    file_type: str = ""

    def copy(self) -> "Document":
        return replace(self)

    def from_relative_path(self, path: str) -> "Document":
        """Resolve ``path`` against the directory holding this document.

        Raises:
            ReferenceResolutionError: if the path is absolute, malformed or
                escapes the repository root.
        """
        path = path.strip()
        if is_remote(path):
            repository_url, file_path, ref = _split_remote(path)
            return Document(
                file_path=file_path,
                repository_url=repository_url,
                default_branch=ref or self.default_branch,
            )

        if posixpath.isabs(path):
            raise ReferenceResolutionError(f"absolute path not allowed: {path!r}")
        joined = posixpath.normpath(posixpath.join(posixpath.dirname(self.file_path), path))
        if joined == ".." or joined.startswith("../"):
            raise ReferenceResolutionError(
                f"{path!r} escapes the repository root from {self.file_path!r}"
            )
        return Document(
            file_path=joined,
            repository_url=self.repository_url,
            default_branch=self.default_branch,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "repository_url": self.repository_url,
            "document_data": self.document_data,
            "default_branch": self.default_branch,
            "creation_time": self.creation_time.isoformat() if self.creation_time else None,
            "is_same": self.is_same,
            "file_type": self.file_type,
        }


@dataclass(slots=True)
class IndexedDocument(Document):
    """A document plus the searchable fields derived from its content.

    - kinds: the resource kinds found in the file.
    - identifiers: partial and full field paths delimited by ``:``,
      e.g. ``spec:replicas``.
    - values: field paths with their value after ``=``,
      e.g. ``spec:replicas=4``.

    All three are sorted and free of duplicates once populated, so that
    re-indexing unchanged content never produces a different record.
    """

    kinds: List[str] = field(default_factory=list)
    identifiers: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: Document) -> "IndexedDocument":
        base = document.copy()
        return cls(**{f.name: getattr(base, f.name) for f in fields(Document)})

    def copy(self) -> "IndexedDocument":
        return replace(
            self,
            kinds=list(self.kinds),
            identifiers=list(self.identifiers),
            values=list(self.values),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = Document.to_dict(self)
        for name in ("kinds", "identifiers", "values"):
            entries = getattr(self, name)
            if entries:
                data[name] = list(entries)
        return data

    def __str__(self) -> str:
        return (
            f"{self.repository_url} {self.file_path} {self.default_branch} "
            f"{self.creation_time} {self.is_same} {self.kinds} "
            f"len(identifiers):{len(self.identifiers)} len(values):{len(self.values)}"
        )
