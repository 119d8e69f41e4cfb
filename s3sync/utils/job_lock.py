"""
Redis-based mutual exclusion for periodic sync jobs.

Two overlapping upload sweeps could upload the same file twice before either
records the object URL, so each job holds a lock named after itself while it
runs. The lock expires on its own in case a worker dies mid-run, and each
holder owns a unique token: a run that outlived its lock can not release the
lock of the run that took over.
"""

import logging
from typing import Optional

import redis
from redis.exceptions import LockError
from redis.lock import Lock

from s3sync.config import settings

logger = logging.getLogger(__name__)

LOCK_PREFIX = "s3sync:lock:"

_redis_client: Optional[redis.StrictRedis] = None


def get_redis_client() -> redis.StrictRedis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.StrictRedis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


def acquire_lock(job_name: str, expire: Optional[int] = None) -> Optional[Lock]:
    """Attempt to acquire the lock for a job. Returns the held lock, or None when another run holds it."""
    lock = get_redis_client().lock(
        f"{LOCK_PREFIX}{job_name}",
        timeout=expire or settings.sync_lock_expire,
        blocking=False,
    )
    if lock.acquire():
        logger.debug(f"Lock acquired for {job_name}.")
        return lock
    logger.info(f"Lock for {job_name} already held. Skipping this cycle.")
    return None


def release_lock(lock: Lock) -> None:
    """Release a lock taken by acquire_lock, unless it already expired."""
    try:
        lock.release()
        logger.debug(f"Lock {lock.name} released.")
    except LockError as e:
        logger.warning(f"Lock {lock.name} was no longer held by this run: {e}")
