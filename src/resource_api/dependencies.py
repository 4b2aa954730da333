"""FastAPI dependencies."""

from fastapi import Request

from .services import ResourceService


def get_resource_service(request: Request) -> ResourceService:
    """Service built once at startup and attached to the app state."""
    return request.app.state.resource_service
