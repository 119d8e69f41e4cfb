"""
Diagnostic API endpoints
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from s3sync.aws_clients import build_s3_client
from s3sync.config import AWSConfig, settings
from s3sync.database import get_db
from s3sync.delete_queue import get_deletion_queue_store
from s3sync.models import FileRecord
from s3sync.utils.file_queries import apply_upload_status_filter
from s3sync.utils.masking import describe_aws_config
from s3sync.utils.subtypes import get_supported_upload_subtypes

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/diagnostic/s3")
def diagnostic_s3(db: Session = Depends(get_db)):
    """
    Show the S3 configuration (credentials masked) and sync counters.
    """
    config = AWSConfig.from_settings()
    subtypes = get_supported_upload_subtypes()

    base = db.query(FileRecord).filter(FileRecord.subtype.in_(subtypes))
    pending = apply_upload_status_filter(base, uploaded=False).count() if subtypes else 0
    uploaded = apply_upload_status_filter(base, uploaded=True).count() if subtypes else 0

    store = get_deletion_queue_store()
    queued = len(store.list_entries()) if store.is_available() else 0

    return {
        "config": describe_aws_config(config),
        "missing_settings": config.missing_client_settings() + ([] if config.bucket else ["bucket"]),
        "client_available": build_s3_client(config) is not None,
        "subtypes": subtypes,
        "files": {"pending": pending, "uploaded": uploaded},
        "deletion_queue": {"backend": settings.s3_delete_queue_backend, "queued": queued},
    }
