"""Custom exceptions and RFC 7807 Problem Detail error handlers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from attendance_ledger.common.constants import LocationDeniedReason, SequenceReason

logger = logging.getLogger(__name__)

BASE_ERROR_URI = "https://attendance-ledger.local/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        reason: Optional[str] = None,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.reason = reason or error_type
        self.errors = errors
        super().__init__(detail)


class NotFoundException(AppException):
    """404 — entity not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            status_code=404,
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=f"{entity_type} with id '{entity_id}' does not exist.",
        )


class DuplicateSubmission(AppException):
    """409 — a declaration already exists for this staff member and day."""

    def __init__(self, staff_id: Any, day: Any) -> None:
        super().__init__(
            status_code=409,
            error_type="duplicate-submission",
            title="Duplicate Submission",
            detail=f"Attendance already submitted for staff '{staff_id}' on {day}.",
        )
        self.staff_id = staff_id
        self.day = day


_SEQUENCE_MESSAGES: dict[SequenceReason, str] = {
    SequenceReason.already_in: "Already clocked in today.",
    SequenceReason.already_out: "Work session for today is already completed.",
    SequenceReason.not_yet_in: "Clock in before clocking out.",
}


class SequenceViolation(AppException):
    """409 — clock-in / clock-out out of order for the day."""

    def __init__(self, reason: SequenceReason) -> None:
        super().__init__(
            status_code=409,
            error_type="sequence-violation",
            title="Sequence Violation",
            detail=_SEQUENCE_MESSAGES[reason],
            reason=reason.value,
        )
        self.sequence_reason = reason


class LocationDenied(AppException):
    """403 — the caller could not prove presence inside the geofence."""

    def __init__(
        self,
        reason: LocationDeniedReason,
        distance_meters: Optional[float] = None,
    ) -> None:
        detail = {
            LocationDeniedReason.outside_geofence: "You are outside the office geofence.",
            LocationDeniedReason.location_unavailable: "Location could not be determined.",
            LocationDeniedReason.timeout: "Location lookup timed out.",
        }[reason]
        super().__init__(
            status_code=403,
            error_type="location-denied",
            title="Location Denied",
            detail=detail,
            reason=reason.value,
        )
        self.denied_reason = reason
        self.distance_meters = distance_meters


class ValidationException(AppException):
    """422 — business-logic validation failures."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(
            status_code=422,
            error_type="validation-error",
            title="Validation Error",
            detail="One or more fields failed validation.",
            errors=errors,
        )


class StorageFailure(AppException):
    """503 — the storage collaborator failed; details stay in the logs."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            status_code=503,
            error_type="storage-failure",
            title="Storage Failure",
            detail=f"Storage is unavailable while performing '{operation}'.",
        )
        self.operation = operation


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy errors raised inside the block into StorageFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Storage failure during %s", operation)
        raise StorageFailure(operation) from exc


# ── RFC 7807 builder ────────────────────────────────────────────────

def _build_problem_detail(exc: AppException, request: Request) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "reason": exc.reason,
        "instance": str(request.url.path),
    }
    if exc.errors:
        body["errors"] = exc.errors
    return body


# ── FastAPI handlers ────────────────────────────────────────────────

async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_problem_detail(exc, request),
        media_type="application/problem+json",
    )


async def _handle_storage_error(
    request: Request,
    exc: SQLAlchemyError,
) -> JSONResponse:
    logger.exception("Unhandled storage error on %s", request.url.path, exc_info=exc)
    return await _handle_app_exception(request, StorageFailure(request.url.path))


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = (
            ".".join(str(p) for p in loc[1:])
            if len(loc) > 1
            else str(loc[0]) if loc else "unknown"
        )
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=422,
        content={
            "type": f"{BASE_ERROR_URI}/validation-error",
            "title": "Validation Error",
            "status": 422,
            "detail": "Request validation failed.",
            "reason": "validation-error",
            "instance": str(request.url.path),
            "errors": field_errors,
        },
        media_type="application/problem+json",
    )


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _handle_storage_error)       # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
