"""Tests for the kustomization schema and its fix-ups."""

from __future__ import annotations

import pytest

from kustsearch.errors import NormalizationError, SingleDecodeError
from kustsearch.parsing.decoder import YamlDecoder
from kustsearch.parsing.schema import (
    KUSTOMIZATION_API_VERSION,
    KustomizationSchema,
    ensure_utf8,
    fix_pre_decode,
)


class TestFixPreDecode:
    """Tests for fix_pre_decode."""

    def test_unchanged_content(self) -> None:
        content = b"resources:\n- a.yaml\n"
        assert fix_pre_decode(content) == content

    def test_renames_image_tags(self) -> None:
        assert fix_pre_decode(b"imageTags:\n- name: nginx\n") == b"images:\n- name: nginx\n"

    def test_legacy_patches_renamed(self) -> None:
        fixed = fix_pre_decode(b"patches:\n- patch.yaml\n")
        assert fixed == b"patchesStrategicMerge:\n- patch.yaml\n"

    def test_inline_patches_kept(self) -> None:
        content = b"patches:\n- path: patch.yaml\n  target:\n    kind: Deployment\n"
        assert fix_pre_decode(content) == content

    def test_invalid_yaml_is_not_fatal(self) -> None:
        content = b"a: b: c\n"
        assert fix_pre_decode(content) == content

    def test_invalid_utf8(self) -> None:
        with pytest.raises(NormalizationError):
            fix_pre_decode(b"\xff\xfe\xfa")

    def test_deeply_nested_content_is_not_fatal(self) -> None:
        content = b"patches: " + b"[" * 5000 + b"]" * 5000 + b"\n"
        assert fix_pre_decode(content) == content


class TestEnsureUtf8:
    """Tests for the UTF-8 check applied to every decoded file."""

    def test_content_returned_unchanged(self) -> None:
        content = b"data:\n  notes: imageTags: x\n"
        assert ensure_utf8(content) is content

    def test_invalid_utf8(self) -> None:
        with pytest.raises(NormalizationError, match="could not fix"):
            ensure_utf8(b"\xff\xfe\xfa")


class TestKustomizationSchema:
    """Tests for KustomizationSchema."""

    def test_from_bytes(self) -> None:
        content = b"""
resources:
- a.yaml
generators:
- gen.yaml
transformers:
- t.yaml
"""
        schema = KustomizationSchema.from_bytes(content, YamlDecoder())

        assert schema.resources == ["a.yaml"]
        assert schema.generators == ["gen.yaml"]
        assert schema.transformers == ["t.yaml"]
        assert schema.kind == ""

    def test_null_lists(self) -> None:
        schema = KustomizationSchema.from_bytes(b"resources:\n", YamlDecoder())
        assert schema.resources == []

    def test_non_list_field(self) -> None:
        with pytest.raises(SingleDecodeError, match="resources must be a list"):
            KustomizationSchema.from_bytes(b"resources: a.yaml\n", YamlDecoder())

    def test_non_string_entry(self) -> None:
        with pytest.raises(SingleDecodeError, match="entries must be strings"):
            KustomizationSchema.from_bytes(b"generators:\n- name: x\n", YamlDecoder())

    def test_fix_defaults_and_bases(self) -> None:
        schema = KustomizationSchema(resources=["a.yaml"], bases=["../base"]).fix()

        assert schema.kind == "Kustomization"
        assert schema.api_version == KUSTOMIZATION_API_VERSION
        assert schema.resources == ["a.yaml", "../base"]
        assert schema.bases == []

    def test_fix_keeps_explicit_kind(self) -> None:
        schema = KustomizationSchema(kind="Component", api_version="v1alpha1").fix()

        assert schema.kind == "Component"
        assert schema.api_version == "v1alpha1"
