# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Enrollment error hierarchy.

Every error carries a stable ``code`` and the HTTP status the controller layer
answers with. The enrollment operation itself never catches these; callers
translate them.
"""

from typing import Any


class EnrollmentError(Exception):
    code: str = "enrollment_error"
    http_status: int = 500

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_response(self, request_id: str | None = None) -> dict[str, Any]:
        return {"error": self.code, "detail": self.message, "request_id": request_id}


class InvalidEnrollmentRequest(EnrollmentError):
    """Username or list id missing/blank."""

    code = "invalid_request"
    http_status = 422


class NotFoundError(EnrollmentError):
    """Strict lookup found no user with that username."""

    code = "user_not_found"
    http_status = 404


class PersistenceError(EnrollmentError):
    """The directory could not create or update the user record."""

    code = "persistence_error"
    http_status = 409


class NotificationError(EnrollmentError):
    """The notifier could not deliver the enrollment notification."""

    code = "notification_failed"
    http_status = 502
