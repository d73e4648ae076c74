"""
MatDB - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR      = Path(__file__).resolve().parent
IMPORTS_DIR   = Path(os.environ.get("MATDB_IMPORTS_DIR", BASE_DIR / "storage" / "imports"))
CSV_SEED_PATH = Path(os.environ.get("MATDB_CSV_SEED",    BASE_DIR / "materials_seed.csv"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("MATDB_DB", f"sqlite:///{BASE_DIR / 'matdb.sqlite'}")

# ── Background queue ───────────────────────────────────────────────────
# Without a broker every queued import runs eagerly in-process.
REDIS_URL = os.environ.get("REDIS_URL", "")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("MATDB_HOST", "0.0.0.0")
PORT   = int(os.environ.get("MATDB_PORT", "5000"))
DEBUG  = os.environ.get("MATDB_DEBUG", "0") == "1"
SECRET = os.environ.get("MATDB_SECRET", "matdb-dev-key-change-in-prod")
LOG_LEVEL = os.environ.get("MATDB_LOG_LEVEL", "INFO")

# ── Import ─────────────────────────────────────────────────────────────
# Uploads at or below this size are imported inside the request,
# anything larger is handed to the background queue.
IMPORT_SYNC_MAX_BYTES = int(os.environ.get("MATDB_IMPORT_SYNC_MAX_BYTES", 1024 * 1024))
MAX_UPLOAD_BYTES      = int(os.environ.get("MATDB_MAX_UPLOAD_BYTES", 64 * 1024 * 1024))
IMPORT_FILE_TYPES     = ("csv", "xlsx")
# CSV text encodings, tried in order; cp1252 covers spreadsheet exports
# from Windows that are not UTF-8.
IMPORT_ENCODINGS      = ("utf-8", "cp1252")

IMPORT_REQUIRED_FIELDS = ("name", "category", "supplier")
IMPORT_FIELDS = ("name", "category", "supplier", "description", "file_path", "metadata")
MAX_NAME_LENGTH = 255

# ── Export ─────────────────────────────────────────────────────────────
EXPORT_FIELDS = (
    "name", "category", "supplier", "description", "file_path",
    "metadata", "uuid", "created_at", "updated_at",
)
DEFAULT_EXPORT_FIELDS = ("name", "category", "supplier", "description")
DEFAULT_EXPORT_FORMAT = "xlsx"
EXPORT_BASENAME = "materials"
EXPORT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MISSING_RELATION_PLACEHOLDER = "N/A"

# Deprecated id-based column names accepted wherever a field list is parsed
FIELD_ALIASES = {"category_id": "category", "supplier_id": "supplier"}

# ── Pagination ─────────────────────────────────────────────────────────
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 100
