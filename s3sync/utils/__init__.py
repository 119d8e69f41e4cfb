"""
Utility functions and helpers for the S3 sync core.
"""

from s3sync.utils.entity_keys import get_entity_key, owner_partition_path
from s3sync.utils.outcome import FailureKind, Outcome
from s3sync.utils.s3_uri import S3Location, parse_s3_uri
from s3sync.utils.time_budget import TimeBudget

__all__ = [
    "FailureKind",
    "Outcome",
    "S3Location",
    "TimeBudget",
    "get_entity_key",
    "owner_partition_path",
    "parse_s3_uri",
]
