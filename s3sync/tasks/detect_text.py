#!/usr/bin/env python3

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3sync.aws_clients import build_rekognition_client
from s3sync.celery_app import celery
from s3sync.config import AWSConfig
from s3sync.database import SessionLocal
from s3sync.models import FileRecord
from s3sync.utils.outcome import FailureKind, Outcome
from s3sync.utils.s3_uri import parse_s3_uri

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 90.0
TEXT_TYPES = ("WORD", "LINE")


def filter_text_detections(detections, confidence: float = DEFAULT_CONFIDENCE, text_type: Optional[str] = None):
    """Keep detections above the confidence threshold and, optionally, of one type.

    Unrecognized types leave the list unfiltered.
    """
    confidence = float(confidence or 0)
    if confidence > 0:
        detections = [d for d in detections if float(d.get("Confidence") or 0) > confidence]

    wanted = str(text_type or "").upper()
    if wanted in TEXT_TYPES:
        detections = [d for d in detections if d.get("Type") == wanted]

    return detections


def detect_text(
    record: FileRecord,
    config: AWSConfig,
    confidence: float = DEFAULT_CONFIDENCE,
    full: bool = False,
    text_type: Optional[str] = None,
    rekognition_client=None,
) -> Outcome:
    """
    Detect text in an image that was already uploaded to S3.

    Args:
        record: The file to scan, must be an uploaded image
        config: AWS connection settings
        confidence: Minimum confidence (0-100, exclusive) a detection needs
        full: Return the full Rekognition detections instead of only the text
        text_type: Only return "word" or "line" detections (case-insensitive)
        rekognition_client: Client to use instead of building one

    Returns:
        Outcome whose value is a list of strings, or of detection dicts when
        ``full`` is set. An image without text gives an empty list.
    """
    if not record.aws_object_url or record.simple_type != "image":
        return Outcome.failure(FailureKind.PRECONDITION_FAILED, "File is not an uploaded image")

    location = parse_s3_uri(record.aws_object_url)
    if location is None or not location.key:
        return Outcome.failure(FailureKind.MALFORMED_INPUT, f"Invalid object URL: {record.aws_object_url}")

    if rekognition_client is None:
        rekognition_client = build_rekognition_client(config)
    if rekognition_client is None:
        return Outcome.failure(FailureKind.CONFIGURATION_INVALID, "Rekognition client not available")

    try:
        response = rekognition_client.detect_text(
            Image={"S3Object": {"Bucket": location.bucket, "Name": location.key}}
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"[File {record.id}] Text detection failed: {e}")
        return Outcome.failure(FailureKind.TRANSPORT_FAILURE, f"Text detection failed: {e}")

    detections = response.get("TextDetections") or []
    if not detections:
        return Outcome.success([])

    detections = filter_text_detections(detections, confidence, text_type)

    if full:
        return Outcome.success(detections)
    return Outcome.success([d.get("DetectedText") for d in detections])


@celery.task(name="s3sync.tasks.detect_text.detect_text_in_file")
def detect_text_in_file(file_id: int, confidence: float = DEFAULT_CONFIDENCE, full: bool = False, text_type: Optional[str] = None):
    """Asynchronous text detection for an uploaded image."""
    with SessionLocal() as db:
        record = db.get(FileRecord, file_id)
        if record is None:
            return {"status": "failure", "error": "not_found", "file_id": file_id}

        outcome = detect_text(record, AWSConfig.from_settings(), confidence=confidence, full=full, text_type=text_type)

    result = outcome.to_dict()
    result["file_id"] = file_id
    return result
