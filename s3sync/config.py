#!/usr/bin/env python3

import os
from dataclasses import dataclass
from typing import List, Optional

from pydantic_settings import BaseSettings

VALID_SCHEMES = ("http", "https")


class Settings(BaseSettings):
    database_url: str
    redis_url: str
    workdir: str

    # Local file storage, relative paths on FileRecord are resolved against this
    files_dir: Optional[str] = None

    # AWS S3 settings
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = "us-east-1"  # Default region
    s3_scheme: str = "https"
    s3_bucket_name: Optional[str] = None
    s3_endpoint_url: Optional[str] = None  # S3-compatible stores (MinIO, Ceph, ...)

    # Which file subtypes get uploaded
    s3_upload_subtypes: List[str] = []
    file_like_subtypes: List[str] = ["file"]

    # Deletion queue: "directory" or "database"
    s3_delete_queue_backend: str = "directory"
    s3_delete_queue_dir: Optional[str] = None

    # Sweep scheduling
    upload_sweep_budget: int = 30  # seconds
    cleanup_sweep_budget: int = 10  # seconds
    sync_lock_expire: int = 300  # seconds
    sync_schedule_minutes: int = 1

    class Config:
        env_file = ".env"

    @property
    def resolved_files_dir(self) -> str:
        return self.files_dir or os.path.join(self.workdir, "files")

    @property
    def resolved_delete_queue_dir(self) -> str:
        return self.s3_delete_queue_dir or os.path.join(self.workdir, "s3sync", "delete_queue")


@dataclass(frozen=True)
class AWSConfig:
    """Connection settings for S3 and Rekognition.

    Built once per task or request and handed to the client factory, the
    upload engine and text detection, which never read ``settings`` themselves.
    """

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: Optional[str] = None
    scheme: Optional[str] = "https"
    bucket: Optional[str] = None
    endpoint_url: Optional[str] = None

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "AWSConfig":
        source = source or settings
        return cls(
            access_key_id=source.aws_access_key_id,
            secret_access_key=source.aws_secret_access_key,
            region=source.aws_region,
            scheme=source.s3_scheme,
            bucket=source.s3_bucket_name,
            endpoint_url=source.s3_endpoint_url,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    def missing_client_settings(self) -> List[str]:
        """Names of the settings preventing a client from being built."""
        missing = []
        if not self.has_credentials:
            missing.append("credentials")
        if not self.region:
            missing.append("region")
        if self.scheme not in VALID_SCHEMES:
            missing.append("scheme")
        return missing


settings = Settings()
