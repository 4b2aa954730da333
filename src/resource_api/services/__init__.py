"""Service layer."""

from .resources import ResourceService

__all__ = ["ResourceService"]
