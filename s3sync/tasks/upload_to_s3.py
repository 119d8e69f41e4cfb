#!/usr/bin/env python3

import logging
import os

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from s3sync.aws_clients import build_object_url, build_s3_client
from s3sync.celery_app import celery
from s3sync.config import AWSConfig, settings
from s3sync.database import SessionLocal
from s3sync.models import FileRecord
from s3sync.utils.entity_keys import get_entity_key
from s3sync.utils.outcome import FailureKind, Outcome

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def upload_file(db: Session, record: FileRecord, config: AWSConfig, data_path: str, s3_client=None) -> Outcome:
    """
    Upload a file record to S3 and store the object URL on the record.

    Steps:
      1. Check the record has an id and a readable file on disk.
      2. Derive the storage key and resolve the bucket and client.
      3. Stream the file to S3 as a private object with its MIME type.
      4. Record the object URL and commit.

    A record that already has an object URL is never uploaded again, and a
    failure never touches an existing URL.

    Returns:
        Outcome whose value is the object URL on success
    """
    if record.aws_object_url:
        return Outcome.success(record.aws_object_url, "File already uploaded")

    if not record.id or record.id < 1 or not record.local_filename:
        return Outcome.failure(FailureKind.PRECONDITION_FAILED, "File record has no id or stored filename")

    local_path = record.get_filename_on_filestore(data_path)
    if not os.path.isfile(local_path):
        logger.warning(f"[File {record.id}] Local file not found: {local_path}")
        return Outcome.failure(FailureKind.PRECONDITION_FAILED, f"Local file not found: {local_path}")

    key = get_entity_key(record)
    if not key:
        return Outcome.failure(FailureKind.MALFORMED_INPUT, f"Could not derive a storage key for file {record.id}")

    if not config.bucket:
        return Outcome.failure(FailureKind.CONFIGURATION_INVALID, "S3 bucket name not set")

    if s3_client is None:
        s3_client = build_s3_client(config)
    if s3_client is None:
        return Outcome.failure(FailureKind.CONFIGURATION_INVALID, "S3 client not available")

    extra_args = {
        "ACL": "private",
        "ContentType": record.mime_type or DEFAULT_MIME_TYPE,
    }

    try:
        with open(local_path, "rb") as file_data:
            s3_client.upload_fileobj(file_data, config.bucket, key, ExtraArgs=extra_args)
    except (Boto3Error, BotoCoreError, ClientError, OSError) as e:
        logger.error(f"[File {record.id}] Failed to upload {local_path} to s3://{config.bucket}/{key}: {e}")
        return Outcome.failure(FailureKind.TRANSPORT_FAILURE, f"Failed to upload to S3: {e}")

    object_url = build_object_url(s3_client, config.bucket, key)

    # store S3 location with the file
    record.aws_object_url = object_url
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[File {record.id}] Uploaded to {object_url} but could not store the object URL: {e}")
        return Outcome.failure(FailureKind.PERSISTENCE_FAILURE, f"Could not store object URL: {e}")

    logger.info(f"[File {record.id}] Uploaded to {object_url}")
    return Outcome.success(object_url)


@celery.task(name="s3sync.tasks.upload_to_s3.upload_file_to_s3")
def upload_file_to_s3(file_id: int):
    """Upload a single file record to S3 outside of the periodic sweep."""
    config = AWSConfig.from_settings()
    with SessionLocal() as db:
        record = db.get(FileRecord, file_id)
        if record is None:
            logger.warning(f"File {file_id} not found, nothing to upload")
            return {"status": "failure", "error": "not_found", "file_id": file_id}

        outcome = upload_file(db, record, config, settings.resolved_files_dir)
        result = outcome.to_dict()
        result["file_id"] = file_id
        return result
