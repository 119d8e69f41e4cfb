"""
File endpoints: text detection on uploaded images and deletion
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from s3sync.config import AWSConfig
from s3sync.database import get_db
from s3sync.delete_queue import get_deletion_queue_store, queue_remote_deletion
from s3sync.models import FileRecord
from s3sync.tasks.detect_text import DEFAULT_CONFIDENCE, detect_text
from s3sync.utils.outcome import FailureKind

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_STATUS_CODES = {
    FailureKind.PRECONDITION_FAILED: 400,
    FailureKind.MALFORMED_INPUT: 422,
    FailureKind.TRANSPORT_FAILURE: 502,
    FailureKind.CONFIGURATION_INVALID: 503,
}


def _get_file_or_404(db: Session, file_id: int) -> FileRecord:
    record = db.get(FileRecord, file_id)
    if record is None:
        raise HTTPException(status_code=404, detail="File not found")
    return record


@router.get("/files/{file_id}/text")
def get_file_text(
    file_id: int,
    confidence: float = Query(DEFAULT_CONFIDENCE, ge=0, le=100),
    full: bool = False,
    type: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Detect text in an uploaded image."""
    record = _get_file_or_404(db, file_id)

    outcome = detect_text(record, AWSConfig.from_settings(), confidence=confidence, full=full, text_type=type)
    if not outcome:
        raise HTTPException(status_code=FAILURE_STATUS_CODES.get(outcome.kind, 500), detail=outcome.message)

    return {"file_id": file_id, "texts": outcome.value}


@router.delete("/files/{file_id}")
def delete_file(file_id: int, db: Session = Depends(get_db)):
    """
    Delete a file record. When the file was uploaded, its S3 object is queued
    for removal by the cleanup sweep once the record is gone.
    """
    record = _get_file_or_404(db, file_id)
    object_url = record.aws_object_url

    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[File {file_id}] Could not delete file record: {e}")
        raise HTTPException(status_code=500, detail="Could not delete file")

    entry_id = None
    try:
        entry_id = queue_remote_deletion(get_deletion_queue_store(), object_url, file_id)
    except (OSError, SQLAlchemyError) as e:
        logger.error(f"[File {file_id}] Deleted locally but could not queue '{object_url}' for removal: {e}")

    return {"status": "deleted", "file_id": file_id, "deletion_queued": entry_id is not None}
