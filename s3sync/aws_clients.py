#!/usr/bin/env python3
"""
boto3 client construction for S3 and Rekognition.

Both factories return None instead of raising when the configuration is
incomplete or the client cannot be created, so callers can skip their work
cleanly. Timeouts are fixed so a dead endpoint can never stall a sweep.
"""

import logging
from typing import Optional
from urllib.parse import quote

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from s3sync.config import AWSConfig
from s3sync.utils.s3_uri import parse_s3_uri

logger = logging.getLogger(__name__)

S3_CONNECT_TIMEOUT = 2
S3_READ_TIMEOUT = 5
REKOGNITION_CONNECT_TIMEOUT = 2
REKOGNITION_READ_TIMEOUT = 10


def build_s3_client(config: AWSConfig):
    """Get the S3 client for storage needs, or None when unavailable."""
    missing = config.missing_client_settings()
    if missing:
        logger.debug(f"S3 client not available, missing settings: {', '.join(missing)}")
        return None

    try:
        return boto3.client(
            "s3",
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            use_ssl=config.scheme == "https",
            endpoint_url=config.endpoint_url or None,
            config=BotoConfig(
                connect_timeout=S3_CONNECT_TIMEOUT,
                read_timeout=S3_READ_TIMEOUT,
            ),
        )
    except Exception as e:
        logger.error(f"Failed to create an S3 client: {e}")
    return None


def build_rekognition_client(config: AWSConfig):
    """Get a Rekognition client for text detection, or None when unavailable.

    Rekognition is always reached over TLS; certificate verification follows
    the configured scheme.
    """
    missing = config.missing_client_settings()
    if missing:
        logger.debug(f"Rekognition client not available, missing settings: {', '.join(missing)}")
        return None

    try:
        return boto3.client(
            "rekognition",
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            use_ssl=True,
            verify=config.scheme == "https",
            config=BotoConfig(
                connect_timeout=REKOGNITION_CONNECT_TIMEOUT,
                read_timeout=REKOGNITION_READ_TIMEOUT,
            ),
        )
    except Exception as e:
        logger.error(f"Failed to create a Rekognition client: {e}")
    return None


def build_object_url(s3_client, bucket: str, key: str) -> str:
    """Path-style object URL for a key, used as the locator of an upload."""
    endpoint = s3_client.meta.endpoint_url.rstrip("/")
    return f"{endpoint}/{bucket}/{quote(key, safe='/')}"


def get_object_by_uri(s3_client, uri: str) -> Optional[dict]:
    """
    Try to get an object from S3 by URI.

    Returns the GetObject response, or None when the URI cannot be parsed or
    the object could not be fetched.
    """
    location = parse_s3_uri(uri)
    if location is None or not location.key:
        return None

    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
    except (BotoCoreError, ClientError) as e:
        logger.info(f"Fetching object failed for URI '{uri}': {e}")
        return None

    body = response.get("Body")
    if body is not None:
        body.close()
    return response
