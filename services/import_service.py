"""
services.import_service - Entry point for an uploaded import file.

Stores the upload, records an ImportJob, then either runs it inside the
request (small files) or hands it to the queue (large files).  Both
paths execute the very same jobs.runner.run_job().
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from werkzeug.utils import secure_filename

import config
from db.engine import get_session
from db.models import JobStatus
from import_engine.field_map import FieldSpec
from import_engine.mode import ImportMode, select_mode
from import_engine.tabular import file_type
from jobs import create_job, run_job, submit

logger = logging.getLogger(__name__)

QUEUED_MESSAGE = "Import started in background. This may take a while to complete."
NOTHING_IMPORTED_MESSAGE = "Import completed, but no materials were added. Check the file format."


def store_upload(filename: str, content: bytes) -> Path:
    """Write the upload under IMPORTS_DIR with a collision-free name."""
    imports_dir = Path(config.IMPORTS_DIR)
    imports_dir.mkdir(parents=True, exist_ok=True)
    safe = secure_filename(filename) or f"upload.{file_type(filename)}"
    path = imports_dir / f"{uuid.uuid4().hex}_{safe}"
    path.write_bytes(content)
    return path


def completed_message(created: int) -> str:
    if created > 0:
        return f"Successfully imported {created} materials."
    return NOTHING_IMPORTED_MESSAGE


def start_import(
    filename: str,
    content: bytes,
    *,
    field_spec: FieldSpec | None = None,
    threshold: int | None = None,
) -> dict:
    """
    Run or queue an import.  Returns a response dict whose ``status`` is
    ``completed``, ``queued`` or ``error``.
    """
    file_type(filename)
    stored = store_upload(filename, content)
    mode = select_mode(len(content), threshold)

    session = get_session()
    try:
        job = create_job(
            session,
            filename=filename,
            stored_path=str(stored),
            size_bytes=len(content),
            mode=mode.value,
        )
        job_id = job.id
    finally:
        session.close()

    if mode is ImportMode.DEFERRED:
        handle = submit(job_id, field_spec)
        return {"status": "queued", "message": QUEUED_MESSAGE, "job_id": handle.id}

    fields = list(field_spec) if field_spec else None
    job = run_job(job_id, fields)
    if job.status == JobStatus.FAILED:
        return {
            "status": "error",
            "message": f"Error during import: {job.error}",
            "job_id": job_id,
        }

    return {
        "status": "completed",
        "message": completed_message(job.created_count),
        "count": job.created_count,
        "job_id": job_id,
        "summary": job.summary(),
    }


def import_file(path: str | Path) -> dict:
    """Import a file from disk inline, whatever its size (seeding, CLI)."""
    path = Path(path)
    content = path.read_bytes()
    return start_import(path.name, content, threshold=len(content))
