"""Common module — shared enums, exceptions and helpers for the attendance ledger."""

from attendance_ledger.common.constants import (
    DATE_FORMAT,
    NOT_AVAILABLE,
    TIME_FORMAT,
    DeclarationStatus,
    LocationDeniedReason,
    Punctuality,
    SequenceReason,
    SessionEventKind,
    SessionState,
    WorkProgress,
)
from attendance_ledger.common.exceptions import (
    AppException,
    DuplicateSubmission,
    LocationDenied,
    NotFoundException,
    SequenceViolation,
    StorageFailure,
    ValidationException,
    register_exception_handlers,
    storage_errors,
)

__all__ = [
    # Constants / Enums
    "DeclarationStatus",
    "LocationDeniedReason",
    "Punctuality",
    "SequenceReason",
    "SessionEventKind",
    "SessionState",
    "WorkProgress",
    "DATE_FORMAT",
    "TIME_FORMAT",
    "NOT_AVAILABLE",
    # Exceptions
    "AppException",
    "DuplicateSubmission",
    "LocationDenied",
    "NotFoundException",
    "SequenceViolation",
    "StorageFailure",
    "ValidationException",
    "register_exception_handlers",
    "storage_errors",
]
