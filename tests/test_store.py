"""
Tests for backend.records.store — file record CRUD.
"""

import os
import sqlite3
import tempfile

import pytest

from backend.database import get_db, init_db
from backend.errors import StoreError
from backend.models import FileStatus, NewFileRecord, TradeRecord
from backend.records import store


@pytest.fixture
def tmp_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_db(path)
    yield path
    os.unlink(path)


def _fields(filename="trades.xml", uploaded="2026-01-01T00:00:00+00:00", **overrides):
    trades = overrides.pop("sample_trades", [
        TradeRecord(date="2024-01-02", symbol="AAPL", type="BUY", quantity=10, price=1.5),
    ])
    data = dict(
        filename=filename,
        file_type="xml",
        file_size_kb=1.25,
        raw_content="<trades/>",
        trade_count=len(trades),
        sample_trades=trades,
        upload_timestamp=uploaded,
    )
    data.update(overrides)
    return NewFileRecord(**data)


class TestCreateRecord:
    def test_assigns_id(self, tmp_db):
        record_id = store.create_record(_fields(), tmp_db)
        assert record_id

        record = store.get_record(record_id, tmp_db)
        assert record.id == record_id
        assert record.status is FileStatus.PROCESSING
        assert record.filename == "trades.xml"
        assert record.file_size == "1.25 KB"
        assert record.trade_count == 1
        assert record.sample_trades[0].symbol == "AAPL"
        assert record.sample_trades[0].counterparty is None

    def test_same_filename_distinct_records(self, tmp_db):
        a = store.create_record(_fields(), tmp_db)
        b = store.create_record(_fields(), tmp_db)
        assert a != b
        assert len(store.list_all(tmp_db)) == 2

    def test_sample_trade_order_preserved(self, tmp_db):
        trades = [TradeRecord(symbol=s) for s in ["C", "A", "B"]]
        record_id = store.create_record(_fields(sample_trades=trades), tmp_db)
        record = store.get_record(record_id, tmp_db)
        assert [t.symbol for t in record.sample_trades] == ["C", "A", "B"]

    def test_sqlite_failure_becomes_store_error(self, tmp_db, monkeypatch):
        def broken(*args, **kwargs):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr("backend.records.store.init_db", broken)
        with pytest.raises(StoreError, match="database is locked"):
            store.create_record(_fields(), tmp_db)


class TestUpdateStatus:
    def test_processing_to_completed(self, tmp_db):
        record_id = store.create_record(_fields(), tmp_db)
        store.update_status(record_id, FileStatus.COMPLETED, tmp_db)
        assert store.get_record(record_id, tmp_db).status is FileStatus.COMPLETED

    def test_processing_to_failed(self, tmp_db):
        record_id = store.create_record(_fields(), tmp_db)
        store.update_status(record_id, "Failed", tmp_db)
        assert store.get_record(record_id, tmp_db).status is FileStatus.FAILED

    def test_terminal_status_is_final(self, tmp_db):
        record_id = store.create_record(_fields(), tmp_db)
        store.update_status(record_id, FileStatus.COMPLETED, tmp_db)

        with pytest.raises(StoreError):
            store.update_status(record_id, FileStatus.PROCESSING, tmp_db)
        with pytest.raises(StoreError):
            store.update_status(record_id, FileStatus.FAILED, tmp_db)
        assert store.get_record(record_id, tmp_db).status is FileStatus.COMPLETED

    def test_missing_record(self, tmp_db):
        with pytest.raises(StoreError, match="not found"):
            store.update_status("nonexistent", FileStatus.COMPLETED, tmp_db)


class TestListAll:
    def test_empty(self, tmp_db):
        assert store.list_all(tmp_db) == []

    def test_newest_first(self, tmp_db):
        store.create_record(_fields("old.xml", "2026-01-01T00:00:00+00:00"), tmp_db)
        store.create_record(_fields("new.xml", "2026-03-01T00:00:00+00:00"), tmp_db)
        store.create_record(_fields("mid.xml", "2026-02-01T00:00:00+00:00"), tmp_db)

        names = [r.filename for r in store.list_all(tmp_db)]
        assert names == ["new.xml", "mid.xml", "old.xml"]

    def test_limit(self, tmp_db):
        for month in range(1, 8):
            store.create_record(_fields(f"{month}.xml", f"2026-0{month}-01T00:00:00+00:00"), tmp_db)

        recent = store.list_all(tmp_db, limit=5)
        assert [r.filename for r in recent] == ["7.xml", "6.xml", "5.xml", "4.xml", "3.xml"]

    def test_reads_legacy_size_rows(self, tmp_db):
        with get_db(tmp_db) as conn:
            conn.execute(
                """INSERT INTO files (id, filename, status, file_type, file_size_kb, upload_timestamp)
                   VALUES (?,?,?,?,?,?)""",
                ("legacy", "old.xml", "Completed", "xml", "10.00 KB", "2025-01-01"),
            )
        record = store.list_all(tmp_db)[0]
        assert record.file_size_kb == 10.0

    @pytest.mark.parametrize("sample_trades,trade_count", [
        ("{not json", 0),
        ("[]", 3),
    ])
    def test_unreadable_row_becomes_store_error(self, tmp_db, sample_trades, trade_count):
        with get_db(tmp_db) as conn:
            conn.execute(
                """INSERT INTO files (id, filename, file_type, file_size_kb,
                                      trade_count, sample_trades, upload_timestamp)
                   VALUES (?,?,?,?,?,?,?)""",
                ("bad", "bad.xml", "xml", 1.0, trade_count, sample_trades, "2025-01-01"),
            )

        with pytest.raises(StoreError, match="Unreadable file record bad"):
            store.list_all(tmp_db)
        with pytest.raises(StoreError):
            store.get_record("bad", tmp_db)


class TestDeleteRecord:
    def test_delete_existing(self, tmp_db):
        record_id = store.create_record(_fields(), tmp_db)
        assert store.delete_record(record_id, tmp_db) is True
        assert store.get_record(record_id, tmp_db) is None

    def test_delete_nonexistent(self, tmp_db):
        assert store.delete_record("nonexistent", tmp_db) is False
