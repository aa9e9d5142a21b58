"""
Error hierarchy for the schedule core.

Every error carries a stable code, a user-safe message and the HTTP status
the API boundary answers with. Handlers in api/error_handlers.py turn them
into the JSON envelope produced by to_response().
"""

from enum import Enum
from typing import Any, Sequence


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_ID_FORMAT = "INVALID_ID_FORMAT"
    INVALID_BEFORE_DATE = "INVALID_BEFORE_DATE"
    INVALID_AFTER_DATE = "INVALID_AFTER_DATE"
    INVALID_RANGE = "INVALID_RANGE"
    DEPENDENCY = "DEPENDENCY"
    STORAGE_ERROR = "STORAGE_ERROR"


class ScheduleError(Exception):
    """Base exception for all recoverable schedule failures."""

    http_status: int = 500

    def __init__(self, message: str, code: ErrorCode, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_response(self) -> dict:
        error: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"error": error}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(ScheduleError):
    """Raised when an id does not resolve to a stored entity."""

    http_status = 404

    def __init__(self, resource: str, resource_id: object) -> None:
        super().__init__(
            f"{resource} '{resource_id}' not found",
            ErrorCode.NOT_FOUND,
            {"resource": resource, "id": str(resource_id)},
        )
        self.resource = resource
        self.resource_id = resource_id


class InvalidIdFormatError(ScheduleError):
    http_status = 400

    def __init__(self, raw: object) -> None:
        super().__init__(
            "Invalid id format",
            ErrorCode.INVALID_ID_FORMAT,
            {"value": str(raw)},
        )
        self.raw = raw


class InvalidBeforeDateError(ScheduleError):
    http_status = 400

    def __init__(self, raw: str) -> None:
        super().__init__(
            "Invalid 'before' date, expected YYYY-MM-DDTHH:MM:SS",
            ErrorCode.INVALID_BEFORE_DATE,
            {"value": raw},
        )


class InvalidAfterDateError(ScheduleError):
    http_status = 400

    def __init__(self, raw: str) -> None:
        super().__init__(
            "Invalid 'after' date, expected YYYY-MM-DDTHH:MM:SS",
            ErrorCode.INVALID_AFTER_DATE,
            {"value": raw},
        )


class InvalidRangeError(ScheduleError):
    """Raised when a filter's 'after' bound is not strictly before 'before'."""

    http_status = 400

    def __init__(self, after: object, before: object) -> None:
        super().__init__(
            "'after' must be earlier than 'before'",
            ErrorCode.INVALID_RANGE,
            {"after": str(after), "before": str(before)},
        )


class DependencyError(ScheduleError):
    """Raised when a delete is rejected because other entities reference the target."""

    http_status = 409

    def __init__(
        self,
        resource: str,
        resource_id: object,
        event_ids: Sequence[object],
        occurrence_ids: Sequence[object],
    ) -> None:
        super().__init__(
            f"{resource} '{resource_id}' is still referenced by "
            f"{len(occurrence_ids)} occurrence(s)",
            ErrorCode.DEPENDENCY,
            {
                "resource": resource,
                "id": str(resource_id),
                "event_ids": [str(i) for i in event_ids],
                "occurrence_ids": [str(i) for i in occurrence_ids],
            },
        )
        self.resource_id = resource_id
        self.event_ids = list(event_ids)
        self.occurrence_ids = list(occurrence_ids)


class StorageError(ScheduleError):
    """Underlying persistence failure (constraint violation, connection loss, aborted transaction)."""

    http_status = 503

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(
            f"Storage {operation} failed: {message}",
            ErrorCode.STORAGE_ERROR,
            {"operation": operation},
        )
        self.operation = operation
