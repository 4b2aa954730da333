"""Resource API - FastAPI over an embedded SQLite store."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import time
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from . import __version__, routers
from .config import Settings, get_settings
from .database import Store
from .logging_config import configure_logging, get_logger
from .services import ResourceService

SERVICE_TITLE = "Resource API"
SERVICE_DESCRIPTION = "CRUD service for resources backed by SQLite"


def _error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    detail = f"{location}: {first['msg']}" if location else first["msg"]
    return f"Invalid request body: {detail}"


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """Build the application.

    The store and the service are constructed once here and shared through
    `app.state`; pass `store` to run against a specific database.
    """
    settings = settings or get_settings()
    store = store or Store(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        configure_logging(settings)
        get_logger(__name__).info("resource_api_started", database_url=store.database_url)
        yield
        await store.close()

    app = FastAPI(
        title=SERVICE_TITLE,
        description=SERVICE_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.resource_service = ResourceService(store)

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", f"req_{uuid.uuid4().hex[:8]}")
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id, method=request.method, path=request.url.path
        )

        start = time.time()
        logger = get_logger(__name__)

        try:
            response = await call_next(request)
            duration_ms = (time.time() - start) * 1000

            if response.status_code >= 500:  # noqa: PLR2004
                logger.error(
                    "http_request_failed",
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 2),
                )
            else:
                logger.info(
                    "http_request",
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 2),
                )
        except Exception as e:
            duration_ms = (time.time() - start) * 1000
            logger.error(
                "http_request_exception",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration_ms, 2),
                exc_info=True,
            )
            response = _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id", "method", "path")

        response.headers["X-Correlation-ID"] = correlation_id
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown paths and unsupported methods both read as a missing route
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            url = request.url.path
            if request.url.query:
                url = f"{url}?{request.url.query}"
            return _error(status.HTTP_404_NOT_FOUND, f"Route {url} not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.get("/")
    async def root():
        """Root endpoint - API information."""
        return {
            "name": SERVICE_TITLE,
            "version": __version__,
            "description": SERVICE_DESCRIPTION,
        }

    app.include_router(routers.health.router)
    app.include_router(routers.resources.router, prefix="/api")

    return app
