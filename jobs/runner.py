"""
jobs.runner - Drive one ImportJob from pending to a terminal state.

Both execution paths end up in run_job(): the inline path calls it
directly, the queued path calls it from the Celery task.  Whatever
happens inside, the job row leaves here finished, exactly once.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

import config
from db.engine import get_session, init_db, is_initialised
from db.models import ImportJob, JobStatus
from import_engine.errors import PipelineFatalError
from import_engine.field_map import FieldSpec
from import_engine.importer import ImportOrchestrator
from import_engine.report import ImportSummary
from import_engine.tabular import read_rows_from_path

logger = logging.getLogger(__name__)


def create_job(
    session: Session,
    *,
    filename: str,
    stored_path: str,
    size_bytes: int,
    mode: str,
) -> ImportJob:
    job = ImportJob(
        filename=filename,
        stored_path=stored_path,
        size_bytes=size_bytes,
        mode=mode,
        status=JobStatus.PENDING,
    )
    session.add(job)
    session.commit()
    logger.info("Import job %s created (%s, %d bytes, %s)",
                job.id, filename, size_bytes, mode)
    return job


def get_job(job_id: str) -> ImportJob | None:
    """Current state of a job, or None if the id is unknown."""
    session = _open_session()
    try:
        return session.get(ImportJob, job_id)
    finally:
        session.close()


def mark_running(session: Session, job: ImportJob) -> None:
    job.status = JobStatus.RUNNING
    job.started_at = datetime.now(timezone.utc)
    session.commit()


def mark_finished(
    session: Session,
    job: ImportJob,
    status: str,
    *,
    summary: ImportSummary | None = None,
    error: str | None = None,
) -> bool:
    """
    Move ``job`` to a terminal status.  Returns False (and leaves the
    row alone) if the job had already finished.
    """
    if status not in JobStatus.TERMINAL:
        raise ValueError(f"{status!r} is not a terminal job status")
    session.refresh(job)
    if job.is_terminal:
        logger.warning("Import job %s already finished as %s", job.id, job.status)
        return False

    job.status = status
    job.error = error
    if summary is not None:
        job.total_rows = summary.total_rows
        job.created_count = summary.created
        job.rejected_count = summary.rejected
        job.rejections_json = json.dumps(summary.rejections, ensure_ascii=False)
    job.finished_at = datetime.now(timezone.utc)
    session.commit()
    return True


def run_job(job_id: str, fields: list[str] | None = None) -> ImportJob | None:
    """
    Execute the import for ``job_id``.  Never raises: a file that cannot
    be parsed or a crash outside row processing ends in FAILED.
    """
    session = _open_session()
    try:
        job = session.get(ImportJob, job_id)
        if job is None:
            logger.error("Import job %s does not exist", job_id)
            return None
        if job.is_terminal:
            logger.warning("Import job %s already finished as %s", job_id, job.status)
            return job

        mark_running(session, job)

        try:
            field_spec = FieldSpec.for_import(fields)
            rows = read_rows_from_path(job.stored_path, job.filename)
        except (PipelineFatalError, ValueError) as exc:
            logger.error("Import job %s cannot start: %s", job_id, exc)
            mark_finished(session, job, JobStatus.FAILED, error=str(exc))
            return job
        except Exception as exc:
            logger.exception("Import job %s crashed while reading its file", job_id)
            mark_finished(session, job, JobStatus.FAILED, error=f"Unexpected: {exc}")
            return job

        try:
            summary = ImportOrchestrator(session, field_spec).run(rows)
        except Exception as exc:
            logger.exception("Import job %s crashed", job_id)
            session.rollback()
            mark_finished(session, job, JobStatus.FAILED, error=f"Unexpected: {exc}")
            return job

        mark_finished(session, job, summary.status, summary=summary)
        logger.info("Import job %s finished as %s", job_id, job.status)
        return job
    finally:
        session.close()


def _open_session() -> Session:
    # A freshly started worker process has no engine yet
    if not is_initialised():
        init_db(config.DB_URL)
    return get_session()
