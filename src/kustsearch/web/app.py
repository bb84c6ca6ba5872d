"""FastAPI application exposing manifest parsing over HTTP."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from kustsearch.config import AppConfig
from kustsearch.errors import KustSearchError
from kustsearch.index.parser import ManifestParser
from kustsearch.index.references import ReferenceExtractor
from kustsearch.models import Document
from kustsearch.parsing.decoder import YamlDecoder
from kustsearch.utils.files import is_manifest

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="kustsearch", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class DocumentPayload(BaseModel):
    file_path: str
    document_data: str = ""
    repository_url: str = ""
    default_branch: str = ""


class ReferencesPayload(DocumentPayload):
    include_resources: bool | None = None
    include_generators: bool | None = None
    include_transformers: bool | None = None


def _to_document(payload: DocumentPayload) -> Document:
    return Document(
        file_path=payload.file_path,
        repository_url=payload.repository_url,
        document_data=payload.document_data,
        default_branch=payload.default_branch,
    )


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/parse")
async def parse_document(payload: DocumentPayload) -> dict[str, Any]:
    if not payload.file_path.strip():
        raise HTTPException(status_code=400, detail="Empty file path")

    parser = ManifestParser(YamlDecoder(), AppConfig())
    try:
        record = parser.parse(_to_document(payload))
    except KustSearchError as exc:
        LOGGER.info("Cannot parse %s: %s", payload.file_path, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return record.to_dict()


@app.post("/references")
async def list_references(payload: ReferencesPayload) -> dict[str, List[dict[str, Any]]]:
    extractor = ReferenceExtractor(YamlDecoder(), AppConfig())
    try:
        children = extractor.get_resources(
            _to_document(payload),
            include_resources=payload.include_resources,
            include_generators=payload.include_generators,
            include_transformers=payload.include_transformers,
        )
    except KustSearchError as exc:
        LOGGER.info("Cannot read references of %s: %s", payload.file_path, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"documents": [child.to_dict() for child in children]}


@app.get("/manifest")
async def check_manifest(path: str) -> dict[str, Any]:
    return {"path": path, "is_manifest": is_manifest(path, AppConfig().manifest_names)}
