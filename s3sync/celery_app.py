# s3sync/celery_app.py

import logging

from celery import Celery
from celery.signals import task_failure

from s3sync.config import settings

logger = logging.getLogger(__name__)

celery = Celery(
    "s3sync",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

# Retain connection retry behavior at startup
celery.conf.broker_connection_retry_on_startup = True

# Set the default queue and routing so that tasks are enqueued on "s3sync"
celery.conf.task_default_queue = "s3sync"
celery.conf.task_routes = {
    "s3sync.tasks.*": {"queue": "s3sync"},
}


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, args=None,
                         kwargs=None, traceback=None, einfo=None, **kw):
    """Log Celery task failures with the task context."""
    logger.error(
        f"Task {sender.name if sender else 'Unknown'} [{task_id or 'N/A'}] failed: {exception!r} "
        f"(args={args or []}, kwargs={kwargs or {}})"
    )
