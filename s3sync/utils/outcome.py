"""
Typed outcomes for the sync core.

Every engine call returns an :class:`Outcome` instead of raising, so a single
bad file never aborts a batch while callers (and tests) can still tell the
failure reasons apart.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FailureKind(str, Enum):
    """Why an operation did not succeed."""

    CONFIGURATION_INVALID = "configuration_invalid"  # credentials, region, scheme, bucket
    TRANSPORT_FAILURE = "transport_failure"  # timeouts, connection and service errors
    MALFORMED_INPUT = "malformed_input"  # unparseable URI, bad key, corrupt queue entry
    PRECONDITION_FAILED = "precondition_failed"  # record not eligible for the operation
    PERSISTENCE_FAILURE = "persistence_failure"  # database write failed


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    kind: Optional[FailureKind] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None, message: str = "") -> "Outcome":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, kind: FailureKind, message: str = "") -> "Outcome":
        return cls(ok=False, kind=kind, message=message)

    def to_dict(self) -> dict:
        result = {"status": "success" if self.ok else "failure", "message": self.message}
        if self.ok:
            result["value"] = self.value
        else:
            result["error"] = self.kind.value if self.kind else None
        return result
