"""
Celery tasks for the import queue.
"""

import logging

from jobs.celery_app import celery_app
from jobs.runner import run_job

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="matdb.run_import_job")
def run_import_job(self, job_id, fields=None):
    """
    Run a queued import.  The job row carries the outcome; the return
    value is only the terminal status for worker logs.
    """
    logger.info("Worker %s picked up import job %s", self.request.hostname, job_id)
    job = run_job(job_id, fields)
    if job is None:
        return {"error": "Import job not found"}
    return {"job_id": job.id, "status": job.status}
