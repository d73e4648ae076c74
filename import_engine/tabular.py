"""
import_engine.tabular - Low-level CSV / XLSX reading and cleaning.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG), cp1252 fallback for non-UTF-8 text
  • Header normalisation ("Category Name " → "category_name")
  • Cell values stringified and stripped, blank lines dropped
  • Returns an ordered list of rows (column name → text)
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from pathlib import Path

import openpyxl

import config
from import_engine.errors import PipelineFatalError

Row = dict[str, str]


def file_type(filename: str) -> str:
    """Return the lower-case extension, or raise if it is not importable."""
    ext = Path(filename or "").suffix.lower().lstrip(".")
    if ext not in config.IMPORT_FILE_TYPES:
        raise PipelineFatalError(
            f"Unsupported file type '{ext or filename}' "
            f"(expected {', '.join(config.IMPORT_FILE_TYPES)})"
        )
    return ext


def read_rows(raw: str | bytes, filename: str) -> list[Row]:
    """Parse file content into rows.  Raises PipelineFatalError."""
    if file_type(filename) == "xlsx":
        if isinstance(raw, str):
            raise PipelineFatalError("XLSX content must be bytes")
        return _read_xlsx(raw)
    return _read_csv(raw)


def read_rows_from_path(path: str | Path, filename: str | None = None) -> list[Row]:
    try:
        with open(path, "rb") as fh:
            content = fh.read()
    except OSError as exc:
        raise PipelineFatalError(f"Cannot read stored file: {exc}") from exc
    return read_rows(content, filename or Path(path).name)


def normalise_header(header) -> str:
    if header is None:
        return ""
    text = str(header).lstrip("\ufeff").strip().lower()
    return "_".join(text.split())


# ── CSV ────────────────────────────────────────────────────────────────

def _read_csv(raw: str | bytes) -> list[Row]:
    text = _decode(raw)
    if not text or not text.strip():
        raise PipelineFatalError("File has no header row or is empty")

    # A single cell may be as large as the upload itself
    if csv.field_size_limit() < config.MAX_UPLOAD_BYTES:
        csv.field_size_limit(config.MAX_UPLOAD_BYTES)

    reader = csv.DictReader(io.StringIO(text))
    try:
        if not reader.fieldnames:
            raise PipelineFatalError("File has no header row or is empty")
        reader.fieldnames = [normalise_header(h) for h in reader.fieldnames]
        return [row for row in (_clean(r) for r in reader) if row]
    except csv.Error as exc:
        raise PipelineFatalError(f"Malformed CSV: {exc}") from exc


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        for encoding in config.IMPORT_ENCODINGS:
            try:
                return raw.decode(encoding)
            except UnicodeDecodeError:
                continue
        raise PipelineFatalError(
            f"File is not valid text (tried {', '.join(config.IMPORT_ENCODINGS)})"
        )
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


# ── XLSX ───────────────────────────────────────────────────────────────

def _read_xlsx(raw: bytes) -> list[Row]:
    try:
        wb = openpyxl.load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    except Exception as exc:
        raise PipelineFatalError(f"Unreadable XLSX file: {exc}") from exc

    try:
        return _sheet_rows(wb)
    except PipelineFatalError:
        raise
    except Exception as exc:
        # read-only sheets are parsed lazily, so broken XML surfaces here
        raise PipelineFatalError(f"Unreadable XLSX sheet: {exc}") from exc
    finally:
        wb.close()


def _sheet_rows(wb) -> list[Row]:
    ws = wb.worksheets[0] if wb.worksheets else None
    if ws is None:
        raise PipelineFatalError("Workbook has no sheets")

    values = ws.iter_rows(values_only=True)
    header_cells = next(values, None)
    if not header_cells or not any(c is not None for c in header_cells):
        raise PipelineFatalError("File has no header row or is empty")
    headers = [normalise_header(h) for h in header_cells]

    rows: list[Row] = []
    for cells in values:
        raw_row = {h: cells[i] if i < len(cells) else None
                   for i, h in enumerate(headers)}
        row = _clean(raw_row)
        if row:
            rows.append(row)
    return rows


# ── Shared ─────────────────────────────────────────────────────────────

def _clean(raw_row: dict) -> Row | None:
    """Stringify + strip every cell; None for an entirely blank line."""
    row: Row = {}
    for key, value in raw_row.items():
        if not key:
            continue                # overflow cells / unnamed columns
        row[key] = _cell_text(value)
    if not any(row.values()):
        return None
    return row


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        value = "; ".join("" if v is None else str(v) for v in value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
