"""
Endpoints to trigger the sync sweeps outside of the Celery Beat schedule
"""
import logging

from fastapi import APIRouter

from s3sync.tasks.sync_cron import cleanup_s3, upload_files_to_s3

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sync/upload")
def trigger_upload_sweep():
    task = upload_files_to_s3.delay()
    logger.info(f"Queued upload sweep {task.id}")
    return {"task_id": task.id, "status": "queued"}


@router.post("/sync/cleanup")
def trigger_cleanup_sweep():
    task = cleanup_s3.delay()
    logger.info(f"Queued cleanup sweep {task.id}")
    return {"task_id": task.id, "status": "queued"}
