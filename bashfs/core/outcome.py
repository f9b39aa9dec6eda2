"""
Operation outcomes for bashfs.

Every operator method returns an OperationResult so callers can tell
"nothing to do" apart from a genuine failure without reading the logs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class OutcomeStatus(Enum):
    """How an operation ended."""
    DONE = "done"                        # Operation performed
    ALREADY_EXISTS = "already_exists"    # mkdir target was already there
    ALREADY_ABSENT = "already_absent"    # Removal target was already gone
    MISSING = "missing"                  # Required path absent, no OS call made
    NOT_A_DIRECTORY = "not_a_directory"
    FAILED = "failed"                    # The OS call raised


# Statuses that leave the filesystem in the requested state
SUCCESS_STATUSES = frozenset({OutcomeStatus.DONE, OutcomeStatus.ALREADY_ABSENT})


@dataclass
class OperationResult:
    """Result of a single filesystem or process operation."""
    operation: str
    path: str
    status: OutcomeStatus
    message: Optional[str] = None
    errno: Optional[int] = None
    data: Optional[Any] = None

    @property
    def success(self) -> bool:
        return self.status in SUCCESS_STATUSES

    @property
    def failed(self) -> bool:
        """True only when the OS call itself raised."""
        return self.status is OutcomeStatus.FAILED

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def from_error(cls, operation: str, path: str, error: Exception) -> "OperationResult":
        """Build a FAILED result carrying the OS-provided reason."""
        return cls(
            operation=operation,
            path=path,
            status=OutcomeStatus.FAILED,
            message=str(error),
            errno=getattr(error, "errno", None),
        )
