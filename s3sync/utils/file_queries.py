"""
Shared file query utilities for filtering files by upload status.

A file is "pending" while it has no S3 object URL and "uploaded" once the URL
is recorded. Pending is derived from the record itself, so the upload sweep
needs no checkpoint: every run simply starts at the oldest pending file.
"""

from typing import Iterator, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from s3sync.models import FileRecord

DEFAULT_BATCH_SIZE = 100


def apply_upload_status_filter(query: Query, uploaded: bool) -> Query:
    """
    Filter a FileRecord query on whether the file has been uploaded to S3.

    Args:
        query: The base SQLAlchemy query for FileRecord objects
        uploaded: True for files with an object URL, False for pending files

    Returns:
        Modified query with the filter applied
    """
    if uploaded:
        return query.filter(FileRecord.aws_object_url.isnot(None), FileRecord.aws_object_url != "")
    return query.filter(or_(FileRecord.aws_object_url.is_(None), FileRecord.aws_object_url == ""))


def uploaded_files_query(db: Session, subtypes: Sequence[str], uploaded: bool = True) -> Query:
    """Files of the given subtypes, filtered on upload status, oldest first."""
    query = db.query(FileRecord).filter(FileRecord.subtype.in_(list(subtypes)))
    query = apply_upload_status_filter(query, uploaded)
    return query.order_by(FileRecord.created_at.asc(), FileRecord.id.asc())


def iter_pending_uploads(
    db: Session, subtypes: Sequence[str], batch_size: int = DEFAULT_BATCH_SIZE
) -> Iterator[FileRecord]:
    """
    Stream pending files oldest first, fetching them in batches.

    The ordered ids of the pending files are taken once up front and loaded
    batch by batch, so files that stay pending because their upload failed
    are not returned twice in one run and commits between batches are safe.
    A file uploaded by someone else in the meantime is skipped.
    """
    if not subtypes:
        return

    pending_ids = [
        row.id for row in uploaded_files_query(db, subtypes, uploaded=False).with_entities(FileRecord.id).all()
    ]

    for start in range(0, len(pending_ids), batch_size):
        chunk = pending_ids[start:start + batch_size]
        query = uploaded_files_query(db, subtypes, uploaded=False).filter(FileRecord.id.in_(chunk))
        for record in query.all():
            yield record
