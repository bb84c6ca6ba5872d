"""Exceptions raised while preparing manifests for indexing."""

from __future__ import annotations


class KustSearchError(Exception):
    """Base class for kustsearch errors."""


class NormalizationError(KustSearchError):
    """Raw content could not be normalized before decoding."""


class DecodeError(KustSearchError):
    """Structured content could not be decoded."""


class SingleDecodeError(DecodeError):
    """A kustomization file did not decode into exactly one mapping."""


class MultiDecodeError(DecodeError):
    """A resource file did not decode into a stream of mappings."""


class ReferenceResolutionError(KustSearchError):
    """A referenced path could not be resolved into a document."""
