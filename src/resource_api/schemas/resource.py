"""Resource schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ResourceStatus = Literal["active", "inactive"]
RESOURCE_STATUSES: tuple[str, ...] = ("active", "inactive")
DEFAULT_CATEGORY = "General"
DEFAULT_STATUS: ResourceStatus = "active"


class ResourcePayload(BaseModel):
    """Base request body for resource writes.

    Fields are optional at the schema level so the service can report
    field-specific messages. Status is checked by the service as well.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    description: str | None = None
    category: str | None = None
    status: str | None = None


class ResourceCreate(ResourcePayload):
    """Schema for creating a resource (POST)."""

    pass


class ResourceUpdate(ResourcePayload):
    """Schema for replacing a resource (PUT)."""

    pass


class ResourcePatch(ResourcePayload):
    """Schema for partially updating a resource (PATCH)."""

    def supplied_fields(self) -> dict[str, str | None]:
        """Fields sent by the client, JSON null included."""
        return self.model_dump(exclude_unset=True)


class ResourceFilters(BaseModel):
    """Optional list filters, combined with AND."""

    category: str | None = None
    status: str | None = None
    search: str | None = None


class ResourceRead(BaseModel):
    """Schema for reading a resource."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str = DEFAULT_CATEGORY
    status: ResourceStatus = DEFAULT_STATUS
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    """Summary of a list result. No paging window is applied."""

    total: int = Field(..., ge=0)
    count: int = Field(..., ge=0)
