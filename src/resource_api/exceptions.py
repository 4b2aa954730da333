"""Error taxonomy shared by the store, the service and the routers."""

from typing import Literal

ErrorKind = Literal["validation", "not_found", "storage"]


class ResourceAPIError(Exception):
    """Base class for expected failures."""

    kind: ErrorKind = "storage"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ResourceAPIError):
    """Raised when a payload field is missing, empty or invalid."""

    kind: ErrorKind = "validation"


class NotFoundError(ResourceAPIError):
    """Raised when no resource matches the requested id."""

    kind: ErrorKind = "not_found"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class StorageError(ResourceAPIError):
    """Raised when the database fails (I/O, constraint, connection)."""

    kind: ErrorKind = "storage"
