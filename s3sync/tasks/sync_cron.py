"""
Periodic tasks keeping S3 in sync with the local files.

Two sweeps run every minute via Celery Beat:

* ``upload_files_to_s3`` uploads files that have no object URL yet, oldest
  first, for at most 30 seconds per run.
* ``cleanup_s3`` works through the deletion queue for at most 10 seconds,
  removing objects whose local file is gone.

Neither sweep keeps a cursor. Pending files and queued deletions are visible
on the records themselves, so whatever a run does not finish (budget spent,
transient error) is simply picked up by the next run.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from s3sync.aws_clients import build_s3_client, get_object_by_uri
from s3sync.celery_app import celery
from s3sync.config import AWSConfig, settings
from s3sync.database import SessionLocal
from s3sync.delete_queue import QueueStore, get_deletion_queue_store
from s3sync.tasks.upload_to_s3 import upload_file
from s3sync.utils.file_queries import iter_pending_uploads
from s3sync.utils.job_lock import acquire_lock, release_lock
from s3sync.utils.s3_uri import parse_s3_uri
from s3sync.utils.subtypes import get_supported_upload_subtypes
from s3sync.utils.time_budget import TimeBudget

logger = logging.getLogger(__name__)

UPLOAD_JOB = "upload_files_to_s3"
CLEANUP_JOB = "cleanup_s3"


class SweepStatus(str, Enum):
    COMPLETED = "completed"
    BUDGET_EXPIRED = "budget_expired"
    ABORTED = "aborted"


class EntryResult(str, Enum):
    DISCARDED = "discarded"  # malformed, can never be actioned
    REMOVED = "removed"  # object confirmed gone
    RETAINED = "retained"  # object still present, retry next run


@dataclass
class SweepReport:
    job: str
    status: SweepStatus = SweepStatus.COMPLETED
    reason: str = ""
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    discarded: int = 0
    retained: int = 0
    elapsed: float = 0.0

    def to_dict(self) -> dict:
        result = asdict(self)
        result["status"] = self.status.value
        return result


def run_upload_sweep(
    db: Session,
    config: AWSConfig,
    data_path: str,
    subtypes: Sequence[str],
    budget_seconds: float = 30,
    clock: Callable[[], float] = time.monotonic,
    s3_client=None,
) -> SweepReport:
    """
    Upload pending files of the given subtypes, oldest first, within a time budget.

    A failed upload leaves the file pending; the next scheduled run is its retry.
    """
    report = SweepReport(job=UPLOAD_JOB)
    budget = TimeBudget(budget_seconds, clock=clock)

    if not subtypes:
        report.status = SweepStatus.ABORTED
        report.reason = "no_subtypes"
        return report

    if s3_client is None:
        s3_client = build_s3_client(config)
    if s3_client is None:
        report.status = SweepStatus.ABORTED
        report.reason = "client_unavailable"
        return report

    logger.info("Starting AWS file upload")

    for record in iter_pending_uploads(db, subtypes):
        if not budget.time_left():
            report.status = SweepStatus.BUDGET_EXPIRED
            break

        outcome = upload_file(db, record, config, data_path, s3_client=s3_client)
        report.processed += 1
        if outcome:
            report.succeeded += 1
        else:
            report.failed += 1
            logger.warning(f"[File {record.id}] Upload skipped ({outcome.kind.value}): {outcome.message}")

    report.elapsed = budget.elapsed
    logger.info(
        f"Done with AWS file upload: {report.succeeded} uploaded, {report.failed} failed, "
        f"status={report.status.value}"
    )
    return report


def process_queue_entry(store: QueueStore, entry_id: str, s3_client) -> EntryResult:
    """Delete the S3 object of one queue entry and drop the entry once it is gone."""
    content = store.read(entry_id)
    if not content or not content.strip():
        logger.warning(f"Discarding empty or unreadable deletion entry {entry_id}")
        store.remove(entry_id)
        return EntryResult.DISCARDED

    try:
        data = json.loads(content)
    except ValueError:
        data = None
    uri = data.get("uri") if isinstance(data, dict) else None
    if not uri or not isinstance(uri, str):
        logger.warning(f"Discarding deletion entry {entry_id} without a usable URI")
        store.remove(entry_id)
        return EntryResult.DISCARDED

    location = parse_s3_uri(uri)
    if location is None or not location.key:
        # TODO: move unparseable entries to a dead-letter directory instead of dropping them
        logger.warning(f"Discarding deletion entry {entry_id} with unparseable URI '{uri}'")
        store.remove(entry_id)
        return EntryResult.DISCARDED

    try:
        s3_client.delete_object(Bucket=location.bucket, Key=location.key)
    except (BotoCoreError, ClientError) as e:
        # Success is judged by the object being gone, not by this call
        logger.info(f"Delete request failed for '{uri}': {e}")

    if get_object_by_uri(s3_client, uri) is None:
        store.remove(entry_id)
        return EntryResult.REMOVED

    logger.info(f"Object '{uri}' still present, keeping deletion entry {entry_id}")
    return EntryResult.RETAINED


def run_deletion_sweep(
    store: QueueStore,
    config: AWSConfig,
    budget_seconds: float = 10,
    clock: Callable[[], float] = time.monotonic,
    s3_client=None,
) -> SweepReport:
    """Work through the deletion queue within a time budget."""
    report = SweepReport(job=CLEANUP_JOB)
    budget = TimeBudget(budget_seconds, clock=clock)

    if not store.is_available():
        report.status = SweepStatus.ABORTED
        report.reason = "queue_unavailable"
        return report

    if s3_client is None:
        s3_client = build_s3_client(config)
    if s3_client is None:
        report.status = SweepStatus.ABORTED
        report.reason = "client_unavailable"
        return report

    logger.info("Starting AWS cleanup")

    for entry_id in store.list_entries():
        if not budget.time_left():
            report.status = SweepStatus.BUDGET_EXPIRED
            break

        try:
            result = process_queue_entry(store, entry_id, s3_client)
        except (OSError, SQLAlchemyError) as e:
            logger.error(f"Deletion queue entry {entry_id} could not be processed, keeping it: {e}")
            result = EntryResult.RETAINED
        report.processed += 1
        if result == EntryResult.REMOVED:
            report.succeeded += 1
        elif result == EntryResult.DISCARDED:
            report.discarded += 1
        else:
            report.retained += 1

    report.elapsed = budget.elapsed
    logger.info(
        f"Done with AWS cleanup: {report.succeeded} removed, {report.discarded} discarded, "
        f"{report.retained} retained, status={report.status.value}"
    )
    return report


def _skipped(job: str) -> dict:
    return SweepReport(job=job, status=SweepStatus.ABORTED, reason="locked").to_dict()


@celery.task(name="s3sync.tasks.sync_cron.upload_files_to_s3")
def upload_files_to_s3(subtypes: Optional[Sequence[str]] = None):
    """
    Periodic task uploading new files to S3.

    Only one instance runs at a time; a run finding the lock held is skipped.
    """
    lock = acquire_lock(UPLOAD_JOB)
    if lock is None:
        return _skipped(UPLOAD_JOB)

    try:
        config = AWSConfig.from_settings()
        supported = get_supported_upload_subtypes(subtypes)
        with SessionLocal() as db:
            report = run_upload_sweep(
                db,
                config,
                settings.resolved_files_dir,
                supported,
                budget_seconds=settings.upload_sweep_budget,
            )
        return report.to_dict()
    except Exception as e:
        logger.error(f"Error in upload_files_to_s3 task: {e}", exc_info=True)
        return {"job": UPLOAD_JOB, "status": "error", "error": str(e)}
    finally:
        release_lock(lock)


@celery.task(name="s3sync.tasks.sync_cron.cleanup_s3")
def cleanup_s3():
    """
    Periodic task removing S3 objects of files deleted locally.

    Only one instance runs at a time; a run finding the lock held is skipped.
    """
    lock = acquire_lock(CLEANUP_JOB)
    if lock is None:
        return _skipped(CLEANUP_JOB)

    try:
        report = run_deletion_sweep(
            get_deletion_queue_store(),
            AWSConfig.from_settings(),
            budget_seconds=settings.cleanup_sweep_budget,
        )
        return report.to_dict()
    except Exception as e:
        logger.error(f"Error in cleanup_s3 task: {e}", exc_info=True)
        return {"job": CLEANUP_JOB, "status": "error", "error": str(e)}
    finally:
        release_lock(lock)
