#!/usr/bin/env python3
"""
Queue of S3 objects waiting to be removed.

When a file is deleted locally its object URL is queued here; the cleanup
sweep later deletes the remote object and drops the entry once the object is
confirmed gone. Two interchangeable backends are provided: a directory of
small JSON files and a database table.
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from s3sync.config import settings
from s3sync.models import DeletionQueueEntry

logger = logging.getLogger(__name__)

ENTRY_EXTENSION = ".json"


def serialize_entry(uri: str) -> str:
    return json.dumps({"uri": uri, "enqueued_at": datetime.now(timezone.utc).isoformat()})


class QueueStore(Protocol):
    def is_available(self) -> bool: ...

    def list_entries(self) -> List[str]: ...

    def read(self, entry_id: str) -> Optional[str]: ...

    def remove(self, entry_id: str) -> None: ...

    def add(self, uri: str) -> str: ...


class DirectoryQueueStore:
    """One ``<id>.json`` file per queued deletion."""

    def __init__(self, path: str):
        self.path = path

    def is_available(self) -> bool:
        return os.path.isdir(self.path) and os.access(self.path, os.R_OK)

    def _entry_path(self, entry_id: str) -> str:
        # Entry ids are plain file names, never paths
        return os.path.join(self.path, os.path.basename(entry_id))

    def list_entries(self) -> List[str]:
        if not self.is_available():
            return []
        entries = []
        with os.scandir(self.path) as it:
            for item in it:
                if item.is_file() and item.name.endswith(ENTRY_EXTENSION):
                    entries.append(item.name)
        return sorted(entries)

    def read(self, entry_id: str) -> Optional[str]:
        try:
            with open(self._entry_path(entry_id), "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read deletion queue entry {entry_id}: {e}")
            return None

    def remove(self, entry_id: str) -> None:
        try:
            os.remove(self._entry_path(entry_id))
        except FileNotFoundError:
            pass

    def add(self, uri: str) -> str:
        os.makedirs(self.path, exist_ok=True)
        entry_id = f"{uuid.uuid4()}{ENTRY_EXTENSION}"
        final_path = self._entry_path(entry_id)
        tmp_path = f"{final_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(serialize_entry(uri))
        os.replace(tmp_path, final_path)
        return entry_id


class DatabaseQueueStore:
    """Queued deletions stored as rows of the ``deletion_queue`` table."""

    def __init__(self, session_factory=None):
        if session_factory is None:
            from s3sync.database import SessionLocal

            session_factory = SessionLocal
        self.session_factory = session_factory

    def is_available(self) -> bool:
        return True

    def list_entries(self) -> List[str]:
        with self.session_factory() as db:
            rows = db.query(DeletionQueueEntry.id).order_by(DeletionQueueEntry.id.asc()).all()
        return [str(row.id) for row in rows]

    def read(self, entry_id: str) -> Optional[str]:
        with self.session_factory() as db:
            entry = db.get(DeletionQueueEntry, int(entry_id))
            return entry.payload if entry else None

    def remove(self, entry_id: str) -> None:
        with self.session_factory() as db:
            db.query(DeletionQueueEntry).filter(DeletionQueueEntry.id == int(entry_id)).delete()
            db.commit()

    def add(self, uri: str) -> str:
        with self.session_factory() as db:
            entry = DeletionQueueEntry(payload=serialize_entry(uri))
            db.add(entry)
            db.commit()
            db.refresh(entry)
            return str(entry.id)


def get_deletion_queue_store() -> QueueStore:
    """Build the queue store selected by ``S3_DELETE_QUEUE_BACKEND``."""
    backend = (settings.s3_delete_queue_backend or "directory").lower()
    if backend == "database":
        return DatabaseQueueStore()
    if backend != "directory":
        logger.warning(f"Unknown deletion queue backend '{backend}', using the directory backend")
    return DirectoryQueueStore(settings.resolved_delete_queue_dir)


def queue_remote_deletion(store: QueueStore, object_url: Optional[str], file_id=None) -> Optional[str]:
    """Queue an S3 object for removal; returns the entry id, or None when there is nothing to remove."""
    if not object_url:
        return None
    entry_id = store.add(object_url)
    logger.info(f"Queued S3 object of file {file_id} for deletion ({entry_id})")
    return entry_id
