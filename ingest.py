#!/usr/bin/env python3
"""
CLI ingest script — uploads one XML trade file and reports on the record store.

Usage:
    python ingest.py --xml ./data/trades_2024-01.xml
    python ingest.py --xml ./data/trades_2024-01.xml --remote
    python ingest.py --stats
    python ingest.py --list
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

import httpx

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from backend import config
from backend.analytics.aggregator import load_summary
from backend.errors import IngestError
from backend.ingest.pipeline import ingest_document
from backend.models import UploadedDocument
from backend.records import store

logger = logging.getLogger("ingest")


def _load_document(path: str) -> UploadedDocument:
    with open(path, "rb") as f:
        content = f.read()
    return UploadedDocument.from_bytes(os.path.basename(path), content)


# ── Ingest one file ──────────────────────────────────────────────────────────

def ingest_local(path: str, db_path: str | None = None) -> dict:
    """Run the ingest pipeline in-process against the local record store."""
    document = _load_document(path)
    logger.info("=== Ingesting: %s (%d bytes) ===", document.name, document.size_bytes)
    result = asyncio.run(ingest_document(document, db_path=db_path))
    logger.info("  [DONE] %s → %s (%d trades)", result.filename, result.file_id, result.trade_count)
    return result.model_dump(mode="json")


def ingest_remote(path: str, backend_url: str | None = None, timeout: float = 60.0) -> dict:
    """Upload the file to a running API instead of writing the store directly."""
    backend_url = backend_url or config.BACKEND_URL
    document = _load_document(path)
    logger.info("=== Uploading: %s → %s ===", document.name, backend_url)

    response = httpx.post(
        f"{backend_url}/files",
        files={"file": (document.name, document.content, "application/xml")},
        timeout=timeout,
    )
    if response.status_code != 200:
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        raise IngestError(f"Upload rejected ({response.status_code}): {detail}")
    return response.json()


def recent_files(limit: int, db_path: str | None = None) -> list[dict]:
    return [
        {
            "id": r.id,
            "filename": r.filename,
            "status": r.status.value,
            "size": r.file_size,
            "trades": r.trade_count,
            "uploaded": r.upload_timestamp,
        }
        for r in store.list_all(db_path, limit=limit)
    ]


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ingest XML trade files")
    parser.add_argument("--xml", help="Path to a single XML file")
    parser.add_argument(
        "--remote", action="store_true",
        help=f"Upload through the API at BACKEND_URL (default {config.BACKEND_URL})",
    )
    parser.add_argument("--stats", action="store_true", help="Print the analytics summary")
    parser.add_argument("--list", action="store_true", help="Print the most recent uploads")
    parser.add_argument(
        "--limit", type=int, default=config.RECENT_FILES_LIMIT,
        help=f"Number of uploads shown by --list (default {config.RECENT_FILES_LIMIT})",
    )
    parser.add_argument("--db-path", default=None, help="Override DATABASE_PATH")

    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    if not (args.xml or args.stats or args.list):
        parser.error("nothing to do: pass --xml, --stats or --list")

    try:
        if args.xml:
            if args.remote:
                result = ingest_remote(args.xml)
            else:
                result = ingest_local(args.xml, db_path=args.db_path)
            print(json.dumps(result, indent=2))

        if args.list:
            print(json.dumps(recent_files(args.limit, db_path=args.db_path), indent=2))

        if args.stats:
            summary = load_summary(args.db_path)
            print(json.dumps(summary.model_dump(), indent=2))
    except IngestError as e:
        logger.error("FAILED: %s", e.message)
        return 1
    except (OSError, httpx.HTTPError) as e:
        logger.error("FAILED: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
