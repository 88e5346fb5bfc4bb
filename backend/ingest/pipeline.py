"""
Ingest pipeline — orchestrates the flow from an uploaded XML file to a stored record.

    upload (name + bytes)
      → validate name and size
      → decode & extract trades
      → create files row (status=Processing)
      → mark Completed, or Failed if anything after creation breaks
"""

import asyncio
import logging
from datetime import datetime, timezone

from backend.ingest.extractor import extract_trades
from backend.ingest.metadata import bytes_to_kb, file_type_for
from backend.ingest.validator import validate_document
from backend.models import FileStatus, IngestResult, NewFileRecord, UploadedDocument
from backend.records import store

logger = logging.getLogger(__name__)


async def ingest_document(
    document: UploadedDocument,
    db_path: str | None = None,
) -> IngestResult:
    """
    Full ingest pipeline for a single upload.

    Validation and parse errors are raised before anything touches the
    store. A ``StoreError`` from record creation is raised as-is; a failure
    after creation marks the record ``Failed`` first, then re-raises.
    """
    # ── 1. Validate ──────────────────────────────────────────────────────────
    validate_document(document)

    # ── 2. Extract ───────────────────────────────────────────────────────────
    text = document.text()
    trades = extract_trades(text)
    logger.info("Extracted %d trades from %s", len(trades), document.name)

    # ── 3. Create files row (status=Processing) ──────────────────────────────
    fields = NewFileRecord(
        filename=document.name,
        status=FileStatus.PROCESSING,
        file_type=file_type_for(document.name),
        file_size_kb=bytes_to_kb(document.size_bytes),
        raw_content=text,
        trade_count=len(trades),
        sample_trades=trades,
        upload_timestamp=datetime.now(timezone.utc).isoformat(),
    )
    file_id = await asyncio.to_thread(store.create_record, fields, db_path)

    # ── 4. Finalise status ───────────────────────────────────────────────────
    try:
        await asyncio.to_thread(store.update_status, file_id, FileStatus.COMPLETED, db_path)
    except Exception:
        logger.exception("Ingest failed for %s (%s)", document.name, file_id)
        await _mark_failed(file_id, db_path)
        raise

    logger.info("Ingest complete: %s → %s", document.name, file_id)
    return IngestResult(
        file_id=file_id,
        filename=document.name,
        status=FileStatus.COMPLETED,
        trade_count=len(trades),
        file_size=fields.file_size,
        message="Ingest successful.",
    )


async def _mark_failed(file_id: str, db_path: str | None) -> None:
    try:
        await asyncio.to_thread(store.update_status, file_id, FileStatus.FAILED, db_path)
    except Exception:
        # The original error is what the caller needs to see.
        logger.exception("Could not mark %s as Failed", file_id)
