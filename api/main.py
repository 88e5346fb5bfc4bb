"""
FastAPI application — POST /files, GET /files, GET /files/recent, GET /files/{file_id},
DELETE /files/{file_id}, GET /analytics.

Uploads run through the ingest pipeline; everything else is a thin wrapper over
the record store and the analytics aggregator.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models import FileDetails, FilesResponse, FileSummary, IngestResponse
from backend import config
from backend.analytics.aggregator import load_summary
from backend.database import init_db
from backend.errors import (
    IngestError,
    InvalidExtension,
    MalformedDocument,
    OversizedDocument,
    StoreError,
)
from backend.ingest.pipeline import ingest_document
from backend.models import AnalyticsSummary, UploadedDocument
from backend.records import store

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[IngestError], int] = {
    InvalidExtension: 400,
    OversizedDocument: 413,
    MalformedDocument: 422,
    StoreError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    init_db()
    logger.info("Record store ready at %s", config.DATABASE_PATH)
    yield


app = FastAPI(
    title="Trade File Ingest",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IngestError)
async def ingest_error_handler(request: Request, exc: IngestError):
    status_code = _STATUS_CODES.get(type(exc), 500)
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# ── POST /files ──────────────────────────────────────────────────────────────

@app.post("/files", response_model=IngestResponse)
async def upload_file(file: UploadFile):
    """Validate, parse and store one XML trade file."""
    content = await file.read()
    document = UploadedDocument.from_bytes(file.filename or "", content)
    result = await ingest_document(document)
    return IngestResponse(**result.model_dump(mode="json"))


# ── GET /files ───────────────────────────────────────────────────────────────

@app.get("/files", response_model=FilesResponse)
def list_files(limit: int | None = None):
    """All uploaded files, newest first."""
    records = store.list_all(limit=limit)
    return FilesResponse(files=[FileSummary.from_record(r) for r in records])


@app.get("/files/recent", response_model=FilesResponse)
def recent_files():
    records = store.list_all(limit=config.RECENT_FILES_LIMIT)
    return FilesResponse(files=[FileSummary.from_record(r) for r in records])


@app.get("/files/{file_id}", response_model=FileDetails)
def get_file(file_id: str):
    """One file with its extracted trades."""
    record = store.get_record(file_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"File {file_id} not found.")
    return FileDetails.from_record(record)


# ── DELETE /files/{file_id} ──────────────────────────────────────────────────

@app.delete("/files/{file_id}")
def delete_file(file_id: str):
    deleted = store.delete_record(file_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"File {file_id} not found.")
    return {"deleted": file_id}


# ── GET /analytics ───────────────────────────────────────────────────────────

@app.get("/analytics", response_model=AnalyticsSummary)
def analytics():
    return load_summary()


# ── GET /health ──────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok"}
