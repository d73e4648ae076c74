"""
Celery configuration for the background import queue.

Worker:  celery -A jobs.celery_app worker --loglevel=info
"""

from celery import Celery

import config

celery_app = Celery("matdb", include=["jobs.tasks"])

celery_app.conf.update(
    broker_url=config.REDIS_URL or "memory://",
    result_backend=config.REDIS_URL or None,
    accept_content=["json"],
    task_serializer="json",
    result_serializer="json",
    task_ignore_result=True,
    timezone="UTC",
)

# Task will run synchronously if Redis is not available
celery_app.conf.task_always_eager = not config.REDIS_URL
