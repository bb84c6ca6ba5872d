"""Tests for the FastAPI web application."""

from __future__ import annotations

from fastapi.testclient import TestClient

from kustsearch.web.app import app


client = TestClient(app)

KUSTOMIZATION = "resources:\n- a.yaml\n- ../../escape.yaml\ngenerators:\n- g.yaml\n"


class TestParseEndpoint:
    """Tests for POST /parse endpoint."""

    def test_parse_resource(self) -> None:
        response = client.post(
            "/parse",
            json={
                "file_path": "base/deployment.yaml",
                "document_data": "kind: Deployment\nspec:\n  replicas: 3\n",
                "repository_url": "https://github.com/example/app",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["kinds"] == ["Deployment"]
        assert data["identifiers"] == ["kind", "spec", "spec:replicas"]
        assert data["values"] == ["kind=Deployment", "spec:replicas=3"]
        assert data["repository_url"] == "https://github.com/example/app"

    def test_empty_fields_omitted(self) -> None:
        response = client.post("/parse", json={"file_path": "empty.yaml", "document_data": ""})

        assert response.status_code == 200
        data = response.json()
        assert "kinds" not in data
        assert "identifiers" not in data
        assert "values" not in data

    def test_invalid_content(self) -> None:
        response = client.post(
            "/parse", json={"file_path": "kustomization.yaml", "document_data": "a: [\n"}
        )

        assert response.status_code == 422
        assert "unable to parse kustomization" in response.json()["detail"]

    def test_empty_path(self) -> None:
        response = client.post("/parse", json={"file_path": "  ", "document_data": "a: 1\n"})
        assert response.status_code == 400


class TestReferencesEndpoint:
    """Tests for POST /references endpoint."""

    def test_references(self) -> None:
        response = client.post(
            "/references",
            json={"file_path": "overlays/prod/kustomization.yaml", "document_data": KUSTOMIZATION},
        )

        assert response.status_code == 200
        documents = response.json()["documents"]
        assert [(d["file_path"], d["file_type"]) for d in documents] == [
            ("overlays/prod/a.yaml", "resource"),
            ("escape.yaml", "resource"),
            ("overlays/prod/g.yaml", "generator"),
        ]

    def test_flags(self) -> None:
        response = client.post(
            "/references",
            json={
                "file_path": "kustomization.yaml",
                "document_data": KUSTOMIZATION,
                "include_resources": False,
            },
        )

        assert response.status_code == 200
        assert [d["file_path"] for d in response.json()["documents"]] == ["g.yaml"]

    def test_unresolvable_reference_skipped(self) -> None:
        response = client.post(
            "/references",
            json={"file_path": "app/kustomization.yaml", "document_data": KUSTOMIZATION},
        )

        paths = [d["file_path"] for d in response.json()["documents"]]
        assert paths == ["app/a.yaml", "app/g.yaml"]

    def test_non_manifest(self) -> None:
        response = client.post(
            "/references", json={"file_path": "deployment.yaml", "document_data": KUSTOMIZATION}
        )

        assert response.status_code == 200
        assert response.json() == {"documents": []}

    def test_invalid_manifest(self) -> None:
        response = client.post(
            "/references",
            json={"file_path": "kustomization.yaml", "document_data": "resources: 3\n"},
        )
        assert response.status_code == 422


class TestManifestEndpoint:
    """Tests for GET /manifest endpoint."""

    def test_manifest(self) -> None:
        response = client.get("/manifest", params={"path": "base/kustomization.yaml"})
        assert response.json() == {"path": "base/kustomization.yaml", "is_manifest": True}

    def test_not_manifest(self) -> None:
        response = client.get("/manifest", params={"path": "base/service.yaml"})
        assert response.json()["is_manifest"] is False
