"""
Error kinds raised by the booking services.

Each error carries a machine-readable ``kind``, the HTTP status it maps to,
a human-readable message and a dict of context fields. Routers turn them
into responses with ``to_http_exception`` or ``as_detail``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BookingSystemError(Exception):
    """Base class for all domain failures"""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def as_detail(self) -> Dict[str, Any]:
        detail = {"error": self.kind, "message": self.message}
        detail.update(self.context)
        return detail


class InvalidRequest(BookingSystemError):
    kind = "invalid_request"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(BookingSystemError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(BookingSystemError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT


class Unprocessable(BookingSystemError):
    kind = "unprocessable"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class InsufficientSeats(BookingSystemError):
    kind = "insufficient_seats"
    status_code = status.HTTP_409_CONFLICT


class UserNotFound(NotFound):
    kind = "user_not_found"


class ScheduleNotFound(NotFound):
    kind = "schedule_not_found"


def to_http_exception(error: BookingSystemError, headers: Optional[Dict[str, str]] = None) -> HTTPException:
    """Convert a domain error into a FastAPI HTTPException"""
    return HTTPException(
        status_code=error.status_code,
        detail=error.as_detail(),
        headers=headers
    )
