"""Main FastAPI application."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mappins import __version__
from mappins.config import Config, config
from mappins.exceptions import (
    CategoryInUseError,
    ConflictError,
    MapPinsError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from mappins.logging_config import configure_logging
from mappins.realtime import Broadcaster
from mappins.routes import categories, pins
from mappins.routes import realtime as realtime_routes
from mappins.store import PinStore, close_store, open_store

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("mappins.access")

_STATUS_CODES: tuple[tuple[type[MapPinsError], int], ...] = (
    (ValidationError, 400),
    (CategoryInUseError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Open the store on startup and release it on shutdown."""
    settings: Config = app.state.settings
    app.state.store = await open_store(settings, app.state.store)
    logger.info("Map Pins ready (%s store)", app.state.store.backend_name)
    yield
    await close_store(app.state.store, settings.SHUTDOWN_TIMEOUT)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain and infrastructure errors into JSON responses."""

    @app.exception_handler(MapPinsError)
    async def handle_domain_error(request: Request, exc: MapPinsError) -> JSONResponse:
        for error_type, status_code in _STATUS_CODES:
            if isinstance(exc, error_type):
                return _error(status_code, exc.message)

        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc
        )
        message = exc.message if isinstance(exc, StoreError) else "Internal server error"
        return _error(500, message)

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        logger.error(
            "Database error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _error(500, "Internal server error")

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return _error(400, "; ".join(problems) or "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == 404 and request.url.path.startswith("/api/"):
            message = "API endpoint not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Last resort: the traceback stays in the server log."""
        logger.error(
            "Unexpected error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _error(500, "Internal server error")


def create_app(
    store: PinStore | None = None,
    broadcaster: Broadcaster | None = None,
    *,
    realtime: bool | None = None,
    settings: Config = config,
) -> FastAPI:
    """Build the application.

    Args:
        store: Store to use instead of the configured one. It is initialized
            on startup and closed on shutdown either way.
        broadcaster: Broadcaster to attach; one is created when realtime
            updates are enabled and none is given.
        realtime: Overrides ``REALTIME_ENABLED``. Passing a broadcaster
            implies ``True``.
        settings: Configuration to read.

    Returns:
        Configured FastAPI application
    """
    if realtime is None:
        realtime = broadcaster is not None or settings.REALTIME_ENABLED
    if broadcaster is None and realtime:
        broadcaster = Broadcaster(settings.ROOM_NAME)

    app = FastAPI(
        title="Map Pins",
        description="Shared map pins with live updates",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.broadcaster = broadcaster if realtime else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log incoming requests similar to the access log."""

        response = await call_next(request)
        client_host = "-"
        if request.client is not None:
            client_host = request.client.host or "-"

        access_logger.info(
            '%s - "%s %s" %s',
            client_host,
            request.method,
            request.url.path,
            response.status_code,
        )
        return response

    register_exception_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}

    # Categories first: /api/pins/categories/... must not match /api/pins/{pin_id}
    app.include_router(categories.router)
    app.include_router(pins.router)
    app.include_router(realtime_routes.router)

    return app


configure_logging(config)

app = create_app()
