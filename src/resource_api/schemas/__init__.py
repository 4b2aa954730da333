"""Common schemas."""

from .common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    ResourceListResponse,
    ResourceResponse,
    ServiceResult,
)
from .resource import (
    DEFAULT_CATEGORY,
    DEFAULT_STATUS,
    RESOURCE_STATUSES,
    Pagination,
    ResourceCreate,
    ResourceFilters,
    ResourcePatch,
    ResourceRead,
    ResourceStatus,
    ResourceUpdate,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_STATUS",
    "RESOURCE_STATUSES",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "Pagination",
    "ResourceCreate",
    "ResourceFilters",
    "ResourceListResponse",
    "ResourcePatch",
    "ResourceRead",
    "ResourceResponse",
    "ResourceStatus",
    "ResourceUpdate",
    "ServiceResult",
]
