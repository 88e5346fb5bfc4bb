"""
SQLite database initialisation and helpers.
"""

import os
import sqlite3
from contextlib import contextmanager

from backend import config

_SCHEMA = """
CREATE TABLE IF NOT EXISTS files (
    id               TEXT PRIMARY KEY,
    filename         TEXT NOT NULL,
    status           TEXT NOT NULL DEFAULT 'Processing',
    file_type        TEXT NOT NULL,
    file_size_kb     REAL NOT NULL,
    size_unit        TEXT NOT NULL DEFAULT 'KB',
    raw_content      TEXT NOT NULL DEFAULT '',
    trade_count      INTEGER NOT NULL DEFAULT 0,
    sample_trades    TEXT NOT NULL DEFAULT '[]',
    upload_timestamp TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_files_uploaded ON files(upload_timestamp);
"""


def _ensure_dir(path: str):
    db_dir = os.path.dirname(path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)


def init_db(db_path: str | None = None):
    """Create tables if they don't exist yet."""
    path = db_path or config.DATABASE_PATH
    _ensure_dir(path)
    conn = sqlite3.connect(path)
    conn.executescript(_SCHEMA)
    conn.close()


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    path = db_path or config.DATABASE_PATH
    _ensure_dir(path)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db(db_path: str | None = None):
    """Context manager that yields a connection and auto-commits/rollbacks."""
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
