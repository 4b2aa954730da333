"""Resources router - CRUD over the resources table."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from ..dependencies import get_resource_service
from ..schemas import (
    ErrorResponse,
    MessageResponse,
    ResourceCreate,
    ResourceFilters,
    ResourceListResponse,
    ResourcePatch,
    ResourceResponse,
    ResourceUpdate,
    ServiceResult,
)
from ..services import ResourceService

router = APIRouter(prefix="/resources", tags=["resources"])

Service = Annotated[ResourceService, Depends(get_resource_service)]

FAILURE_STATUS = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "storage": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _respond(result: ServiceResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    if result.success:
        status_code = success_status
    else:
        status_code = FAILURE_STATUS.get(result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", exclude_none=True),
    )


@router.get("", response_model=ResourceListResponse, responses=ERROR_RESPONSES)
@router.get("/", include_in_schema=False)
async def list_resources(
    service: Service,
    category: str | None = None,
    status: str | None = None,
    search: str | None = None,
) -> JSONResponse:
    """List resources, optionally filtered by category, status and search text."""
    filters = ResourceFilters(category=category, status=status, search=search)
    return _respond(await service.list_resources(filters))


@router.get("/{resource_id}", response_model=ResourceResponse, responses=ERROR_RESPONSES)
async def get_resource(resource_id: str, service: Service) -> JSONResponse:
    """Get resource by ID."""
    return _respond(await service.get_by_id(resource_id))


@router.post(
    "",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_resource(
    service: Service,
    data: Annotated[ResourceCreate | None, Body()] = None,
) -> JSONResponse:
    """Create new resource."""
    result = await service.create(data or ResourceCreate())
    return _respond(result, success_status=status.HTTP_201_CREATED)


@router.put("/{resource_id}", response_model=ResourceResponse, responses=ERROR_RESPONSES)
async def replace_resource(
    resource_id: str,
    service: Service,
    data: Annotated[ResourceUpdate | None, Body()] = None,
) -> JSONResponse:
    """Replace the entire resource."""
    return _respond(await service.replace(resource_id, data or ResourceUpdate()))


@router.patch("/{resource_id}", response_model=ResourceResponse, responses=ERROR_RESPONSES)
async def patch_resource(
    resource_id: str,
    service: Service,
    data: Annotated[ResourcePatch | None, Body()] = None,
) -> JSONResponse:
    """Partial update of resource (PATCH method)."""
    return _respond(await service.patch(resource_id, data))


@router.delete("/{resource_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_resource(resource_id: str, service: Service) -> JSONResponse:
    """Delete resource."""
    return _respond(await service.delete(resource_id))
