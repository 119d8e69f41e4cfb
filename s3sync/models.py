# s3sync/models.py
#!/usr/bin/env python3

import os
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from s3sync.database import Base


class FileRecord(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)

    # Owning user/group id, used to partition storage keys
    owner_id = Column(Integer, nullable=False, index=True)

    # Classification tag, e.g. "file" or "image_upload"
    subtype = Column(String, nullable=False, index=True)

    # The name of the file as it was originally uploaded (if known)
    filename = Column(String)

    # Path on disk, relative to the files directory (e.g. 1/42/photo.jpg)
    local_filename = Column(String, nullable=False)

    # MIME type (optional)
    mime_type = Column(String)

    # Object URL in S3, set once the upload succeeded
    aws_object_url = Column(String, nullable=True, index=True)

    # Timestamp when we inserted this record
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        index=True,
    )

    @property
    def is_synced(self) -> bool:
        return bool(self.aws_object_url)

    @property
    def simple_type(self) -> str:
        """Coarse classification derived from the MIME type ("image", "text", ...)."""
        if not self.mime_type or "/" not in self.mime_type:
            return "general"
        major = self.mime_type.split("/", 1)[0].strip().lower()
        return major or "general"

    def get_filename_on_filestore(self, data_path: str) -> str:
        return os.path.join(data_path, self.local_filename or "")


class DeletionQueueEntry(Base):
    __tablename__ = "deletion_queue"

    id = Column(Integer, primary_key=True, index=True)

    # Serialized {"uri": ..., "enqueued_at": ...}
    payload = Column(Text)

    enqueued_at = Column(DateTime(timezone=True), server_default=func.now())
