from typing import Optional

from fastapi import HTTPException

from tasktracker.constants import ErrorMessages


class TrackerError(HTTPException):
    """
    Base class for every error raised by the tracker core.

    Subclasses carry their HTTP status so routers can let them propagate
    unchanged and FastAPI renders them like any other HTTPException.
    """
    http_status = 500
    default_detail = "Unexpected error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.http_status, detail=detail or self.default_detail)


class NotAuthenticated(TrackerError):
    http_status = 401
    default_detail = ErrorMessages.NOT_AUTHENTICATED


class NotAuthorized(TrackerError):
    http_status = 403
    default_detail = ErrorMessages.ACCESS_DENIED


class NotFound(TrackerError):
    http_status = 404
    default_detail = ErrorMessages.NOT_FOUND


class ValidationError(TrackerError):
    http_status = 400
    default_detail = ErrorMessages.INVALID_INPUT


class LastAdminError(TrackerError):
    """Raised when a change would leave a team without any admin."""
    http_status = 409
    default_detail = ErrorMessages.LAST_ADMIN


class StoreFailure(TrackerError):
    """Opaque downstream failure, including connection loss and timeouts."""
    http_status = 503
    default_detail = ErrorMessages.STORE_FAILURE
