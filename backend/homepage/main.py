"""
Starbucks Homepage Backend - FastAPI Application

Serves the static homepage and a small authentication API backed by MongoDB.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from homepage import __version__
from homepage.config import Settings, get_settings
from homepage.core.exceptions import DatabaseConnectionError, HomepageError, NotFoundError
from homepage.core.logging import setup_logging
from homepage.database.connections import DatabaseConnection
from homepage.database.indexes import create_indexes
from homepage.routers import auth, health, pages

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "A server error occurred. Please try again later."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Validate the token signing secret
    - Connect to MongoDB (fatal outside development)
    - Create indexes

    Shutdown:
    - Close the MongoDB connection within the grace period
    """
    settings: Settings = app.state.settings
    connection: DatabaseConnection = app.state.db

    setup_logging(settings.log_level)
    logger.info(f"Starting up Starbucks Homepage backend ({settings.environment_label})...")

    # Raises ConfigurationError in production without JWT_SECRET
    settings.signing_secret()

    try:
        await connection.connect()
        await create_indexes(connection.get_database())
        info = connection.get_connection_info()
        logger.info(f"Database ready: {info.database} ({info.connection_type})")
    except (DatabaseConnectionError, PyMongoError) as e:
        if not settings.is_development:
            logger.critical(f"Database initialization failed: {e}")
            raise
        logger.warning(f"Development mode - serving without database: {e}")

    yield

    logger.info("Shutting down Starbucks Homepage backend...")
    try:
        await asyncio.wait_for(
            connection.disconnect(),
            timeout=settings.shutdown_grace_seconds,
        )
    except asyncio.TimeoutError:
        logger.error(
            f"Database disconnect did not finish within {settings.shutdown_grace_seconds}s"
        )


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map every error to the ``{success: false, message}`` envelope."""

    @app.exception_handler(HomepageError)
    async def homepage_error_handler(request: Request, exc: HomepageError):
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error_response(exc.status_code, NotFoundError().message)
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        status_code = getattr(exc, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR)
        if not isinstance(status_code, int):
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return _error_response(status_code, INTERNAL_ERROR_MESSAGE)


def create_app(
    settings: Optional[Settings] = None,
    connection: Optional[DatabaseConnection] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings override (defaults to environment settings)
        connection: Connection manager override (defaults to a new one)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Starbucks Homepage API",
        description="""
## Starbucks Homepage API

Static homepage plus user registration and login.

### Endpoints
- **Health**: `/ping`, `/api/health`, `/api/db-status`
- **Authentication**: `/api/auth/check-email`, `/api/auth/register`, `/api/auth/login`
        """,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = connection or DatabaseConnection(settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"{request.method} {request.url.path} - {client_host}")
        return await call_next(request)

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(pages.router)

    # Static assets (must be last)
    if settings.static_dir.is_dir():
        app.mount(
            "/",
            pages.SiteStaticFiles(directory=str(settings.static_dir)),
            name="static",
        )

    return app


# Create app instance
app = create_app()
