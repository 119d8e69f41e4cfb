"""
Helpers to generate storage keys for files uploaded to S3.

Conventions:
    - Files are stored as {lower-bound}/{owner_id}/{file_id}.{ext}
    - lower-bound groups owners in buckets of BUCKET_SIZE so that no single
      "directory" in the bucket grows unbounded.

The key only depends on the owner id, the record id and the extension of the
stored file, so it can always be recomputed without a lookup table.
"""

import math
import os
from typing import Optional

BUCKET_SIZE = 5000


def owner_partition_path(owner_id: int, bucket_size: int = BUCKET_SIZE) -> Optional[str]:
    """Return the sharding path for an owner, e.g. ``10000/12345/``.

    Returns None for owner ids below 1.
    """
    try:
        owner_id = int(owner_id)
    except (TypeError, ValueError):
        return None
    if owner_id < 1:
        return None
    if bucket_size < 1:
        bucket_size = BUCKET_SIZE

    lower_bound = max(math.floor(owner_id / bucket_size) * bucket_size, 1)
    return f"{lower_bound}/{owner_id}/"


def _file_extension(record) -> str:
    for name in (record.local_filename, record.filename):
        if name:
            return os.path.splitext(os.path.basename(name))[1].lstrip(".")
    return ""


def get_entity_key(record) -> Optional[str]:
    """Generate the S3 key for a file record.

    Returns None when the record has no positive id or owner id.
    """
    if record.id is None or record.id < 1:
        return None

    partition = owner_partition_path(record.owner_id)
    if partition is None:
        return None

    key = f"{partition}{record.id}"
    extension = _file_extension(record)
    if extension:
        key += f".{extension}"
    return key
