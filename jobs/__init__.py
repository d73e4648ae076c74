"""
jobs - Background execution of large imports.

Public API:
    submit(job_id)   → JobHandle  (returns immediately)
    run_job(job_id)  → ImportJob  (blocking, used inline and by the worker)
    get_job(job_id)  → ImportJob | None
"""

from jobs.celery_app import celery_app                      # noqa: F401
from jobs.runner import create_job, get_job, run_job        # noqa: F401
from jobs.handle import JobHandle, submit                   # noqa: F401
