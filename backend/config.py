"""
Central configuration — reads environment variables and provides defaults.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ── Database ──────────────────────────────────────────────────────────────────
DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/trade_files.db")

# ── Uploads ───────────────────────────────────────────────────────────────────
ACCEPTED_EXTENSIONS: tuple[str, ...] = tuple(
    ext.strip() for ext in os.getenv("ACCEPTED_EXTENSIONS", ".xml").split(",") if ext.strip()
)
MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))

# ── Views ─────────────────────────────────────────────────────────────────────
RECENT_FILES_LIMIT: int = int(os.getenv("RECENT_FILES_LIMIT", "5"))

# ── CLI ───────────────────────────────────────────────────────────────────────
BACKEND_URL: str = os.getenv("BACKEND_URL", "http://localhost:8000")

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
