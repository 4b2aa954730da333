"""Response envelopes shared by every endpoint."""

from datetime import datetime

from pydantic import BaseModel, Field

from ..exceptions import ErrorKind
from .resource import Pagination, ResourceRead


class ServiceResult(BaseModel):
    """Tagged outcome of a service operation.

    `error_kind` drives the HTTP status and is never serialized.
    """

    success: bool
    data: ResourceRead | list[ResourceRead] | None = None
    error: str | None = None
    message: str | None = None
    pagination: Pagination | None = None
    error_kind: ErrorKind | None = Field(default=None, exclude=True)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind) -> "ServiceResult":
        return cls(success=False, error=error, error_kind=kind)


class ResourceResponse(BaseModel):
    """Single resource envelope."""

    success: bool = True
    data: ResourceRead
    message: str | None = None


class ResourceListResponse(BaseModel):
    """Resource list envelope."""

    success: bool = True
    data: list[ResourceRead]
    pagination: Pagination


class MessageResponse(BaseModel):
    """Envelope carrying only a message."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Envelope for every failure."""

    success: bool = False
    error: str


class HealthResponse(BaseModel):
    """Liveness envelope."""

    success: bool = True
    message: str
    timestamp: datetime
