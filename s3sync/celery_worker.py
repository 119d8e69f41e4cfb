#!/usr/bin/env python3

from celery.schedules import crontab

from s3sync.config import settings

# Import the shared Celery instance
from s3sync.celery_app import celery

# **Ensure all tasks are imported before Celery starts**
from s3sync.tasks.upload_to_s3 import upload_file_to_s3  # noqa: F401
from s3sync.tasks.detect_text import detect_text_in_file  # noqa: F401
from s3sync.tasks.sync_cron import cleanup_s3, upload_files_to_s3  # noqa: F401

_every = f"*/{max(settings.sync_schedule_minutes, 1)}"

celery.conf.beat_schedule = {
    "upload-files-to-s3": {
        "task": "s3sync.tasks.sync_cron.upload_files_to_s3",
        "schedule": crontab(minute=_every),
        "options": {"expires": 55},  # Ensure tasks don't pile up
    },
    "cleanup-s3": {
        "task": "s3sync.tasks.sync_cron.cleanup_s3",
        "schedule": crontab(minute=_every),
        "options": {"expires": 55},
    },
}
