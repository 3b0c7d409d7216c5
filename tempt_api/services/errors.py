"""Error taxonomy shared by the services and the HTTP layer.

Each error carries the HTTP status it maps to and a message that is safe
to show to the caller.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for failures that become structured client responses."""

    status_code: int = 500
    default_message: str = "Server error. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed input. Names the offending field."""

    status_code = 400
    default_message = "Invalid request."

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid {field}.")


class Unauthorized(ServiceError):
    """Admin key missing or wrong."""

    status_code = 401
    default_message = "Unauthorized"


class NotFound(ServiceError):
    """The targeted record key does not exist."""

    status_code = 404
    default_message = "Not found"


class StorageError(ServiceError):
    """A collection file could not be read or decoded."""

    status_code = 500

    def __init__(self, collection: str, reason: str):
        self.collection = collection
        self.reason = reason
        super().__init__()

    def __str__(self) -> str:
        return f"collection {self.collection!r} unreadable: {self.reason}"


class InternalError(ServiceError):
    """Unexpected failure while processing an operation."""

    status_code = 500
