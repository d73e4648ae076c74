"""
jobs.handle - Submit a deferred import and keep a handle on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kombu.exceptions import OperationalError

from db.engine import get_session
from db.models import ImportJob, JobStatus
from import_engine.field_map import FieldSpec
from jobs.runner import get_job, mark_finished
from jobs.tasks import run_import_job

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobHandle:
    """Acknowledgement of an accepted job; poll it for the terminal state."""
    id: str

    def fetch(self) -> ImportJob | None:
        return get_job(self.id)

    def status(self) -> str | None:
        job = self.fetch()
        return job.status if job else None

    def is_terminal(self) -> bool:
        return self.status() in JobStatus.TERMINAL


def submit(job_id: str, field_spec: FieldSpec | None = None) -> JobHandle:
    """
    Queue ``job_id`` for background execution and return at once.

    If the broker refuses the task the job is marked FAILED before the
    error propagates, so it never sits in PENDING forever.
    """
    fields = list(field_spec) if field_spec else None
    try:
        run_import_job.delay(job_id, fields)
    except OperationalError as exc:
        logger.error("Could not queue import job %s: %s", job_id, exc)
        session = get_session()
        try:
            job = session.get(ImportJob, job_id)
            if job is not None:
                mark_finished(session, job, JobStatus.FAILED,
                              error=f"Could not queue import: {exc}")
        finally:
            session.close()
        raise
    logger.info("Import job %s queued", job_id)
    return JobHandle(job_id)
