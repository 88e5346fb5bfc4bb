"""
Record store — create, update, list and delete file records.

Every SQLite failure is re-raised as ``StoreError`` so callers deal with a
single error type regardless of what went wrong underneath.
"""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Optional

from pydantic import ValidationError

from backend.database import get_db, init_db
from backend.errors import StoreError
from backend.models import FileRecord, FileStatus, NewFileRecord

logger = logging.getLogger(__name__)

_COLUMNS = """id, filename, status, file_type, file_size_kb, size_unit,
              raw_content, trade_count, sample_trades, upload_timestamp"""


@contextmanager
def _session(db_path: str | None):
    try:
        init_db(db_path)
        with get_db(db_path) as conn:
            yield conn
    except sqlite3.Error as e:
        raise StoreError(f"Record store failure: {e}") from e


def _row_to_record(row: sqlite3.Row) -> FileRecord:
    data = dict(row)
    try:
        data["sample_trades"] = json.loads(data["sample_trades"] or "[]")
        return FileRecord(**data)
    except (ValueError, ValidationError) as e:
        raise StoreError(f"Unreadable file record {data.get('id')}: {e}") from e


# ── CRUD ─────────────────────────────────────────────────────────────────────

def create_record(fields: NewFileRecord, db_path: str | None = None) -> str:
    """Insert a new file record and return the id assigned to it."""
    record_id = str(uuid.uuid4())
    trades = [t.model_dump() for t in fields.sample_trades]
    with _session(db_path) as conn:
        conn.execute(
            f"""INSERT INTO files ({_COLUMNS})
                VALUES (?,?,?,?,?,?,?,?,?,?)""",
            (
                record_id,
                fields.filename,
                fields.status.value,
                fields.file_type,
                fields.file_size_kb,
                fields.size_unit,
                fields.raw_content,
                fields.trade_count,
                json.dumps(trades, ensure_ascii=False),
                fields.upload_timestamp,
            ),
        )
    logger.debug("Created file record %s for %s", record_id, fields.filename)
    return record_id


def update_status(record_id: str, status: FileStatus, db_path: str | None = None) -> None:
    """Move a record from Processing to a terminal status."""
    status = FileStatus(status)
    with _session(db_path) as conn:
        row = conn.execute(
            "SELECT status FROM files WHERE id=?", (record_id,)
        ).fetchone()
        if row is None:
            raise StoreError(f"File record {record_id} not found")

        current = FileStatus(row["status"])
        if not current.can_transition_to(status):
            raise StoreError(
                f"Cannot move file record {record_id} from {current.value} to {status.value}"
            )

        cur = conn.execute(
            "UPDATE files SET status=? WHERE id=? AND status=?",
            (status.value, record_id, current.value),
        )
        if cur.rowcount == 0:
            raise StoreError(f"File record {record_id} changed during update")
    logger.debug("File record %s → %s", record_id, status.value)


def list_all(db_path: str | None = None, limit: int | None = None) -> list[FileRecord]:
    """Return file records, newest upload first."""
    query = f"SELECT {_COLUMNS} FROM files ORDER BY upload_timestamp DESC"
    params: list = []
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)

    with _session(db_path) as conn:
        rows = conn.execute(query, params).fetchall()
    return [_row_to_record(r) for r in rows]


def get_record(record_id: str, db_path: str | None = None) -> Optional[FileRecord]:
    with _session(db_path) as conn:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM files WHERE id=?", (record_id,)
        ).fetchone()
    return _row_to_record(row) if row else None


def delete_record(record_id: str, db_path: str | None = None) -> bool:
    """Delete a file record. Returns True if found."""
    with _session(db_path) as conn:
        cur = conn.execute("DELETE FROM files WHERE id=?", (record_id,))
    deleted = cur.rowcount > 0
    if deleted:
        logger.info("Deleted file record %s", record_id)
    return deleted
