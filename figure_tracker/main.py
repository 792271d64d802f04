import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from figure_tracker.cache import close_redis
from figure_tracker.db.connection import dispose_engine, get_engine
from figure_tracker.db.models import Base
from figure_tracker.errors import ErrorKind, TrackerError
from figure_tracker.settings import AppSettings, get_settings

from .api import catalog, sharing, stats, tracking
from .schemas.error import ErrorType, ValidationErrorDetail
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    error_response_for,
)
from .utils.request_context import (
    RequestIdLogFilter,
    clear_request_id,
    get_request_id,
    set_request_id,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
for _handler in logging.getLogger().handlers:
    _handler.addFilter(RequestIdLogFilter())
logger = logging.getLogger(__name__)


def validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration that is still unset."""

    warnings = (active_settings or settings).optional_config_warnings()
    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")
        logger.warning("=" * 60)


def _sanitize_database_url(url: str) -> str:
    """Sanitize database URL to hide password in logs."""
    if "://" not in url:
        return url

    scheme, rest = url.split("://", 1)
    if "@" in rest:
        auth, host_db = rest.split("@", 1)
        if ":" in auth:
            user, _ = auth.split(":", 1)
            return f"{scheme}://{user}:***@{host_db}"
        return f"{scheme}://{auth}@{host_db}"

    return url


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    validate_environment()

    logger.info("=" * 60)
    logger.info("Figure Tracker API - Database Preflight Check")
    logger.info("=" * 60)
    logger.info(f"Database Type: {settings.database_type.upper()}")
    logger.info(f"Database URL: {_sanitize_database_url(settings.resolved_database_url)}")

    if settings.database_type == "sqlite":
        logger.info("SQLite mode - creating tables for local development")
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        logger.info("PostgreSQL mode - using Alembic migrations")
        logger.info("Ensure migrations are up to date (run: alembic upgrade head)")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down Figure Tracker API")
    await close_redis()
    await dispose_engine()


app = FastAPI(
    title="Figure Tracker API",
    version="0.1.0",
    description=(
        "Track owned and wished-for collectible figures and share a read-only"
        " snapshot of a collection."
    ),
    lifespan=lifespan,
    redirect_slashes=False,
)


def _default_origins() -> list[str]:
    origins = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend([f"http://{host}:{port}" for port in (3000, 5173)])
    return origins


allow_origins = list(dict.fromkeys(_default_origins() + settings.cors_allow_origins))
logger.info("Configured CORS allow_origins: %s", ", ".join(allow_origins))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    token = set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        clear_request_id(token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    errors = [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(TrackerError)
async def tracker_exception_handler(request: Request, exc: TrackerError):
    """Translate domain errors into structured responses."""
    log = logger.error if exc.kind is ErrorKind.UNAVAILABLE else logger.info
    log(
        "%s for request %s to %s: %s",
        exc.kind.value,
        get_request_id(),
        request.url.path,
        exc.message,
    )

    error_response = error_response_for(exc, path=str(request.url.path))
    headers = None
    if error_response.retry_after is not None:
        headers = {"Retry-After": str(error_response.retry_after)}

    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.model_dump(mode="json"),
        headers=headers,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )

    error_response = build_error_response(
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}


app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
app.include_router(tracking.collection_router, prefix="/collection", tags=["collection"])
app.include_router(tracking.wishlist_router, prefix="/wishlist", tags=["wishlist"])
app.include_router(stats.router, tags=["dashboard"])
app.include_router(sharing.router, prefix="/shares", tags=["sharing"])
app.include_router(sharing.public_router, prefix="/shared", tags=["public"])
