"""Client-side error taxonomy."""
from typing import Any, Optional


class ClixError(Exception):
    """Base class for everything the client core raises."""


class ValidationError(ClixError):
    """A form failed local validation; nothing was sent."""


class GatewayError(ClixError):
    """The Gateway rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class NotFoundError(GatewayError):
    pass


class ConflictError(GatewayError):
    pass


class PermissionDenied(GatewayError):
    """403 from the Gateway, or a local role check that failed."""


STATUS_ERRORS = {
    403: PermissionDenied,
    404: NotFoundError,
    409: ConflictError,
}
