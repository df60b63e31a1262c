"""
Health and status router.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from homepage import __version__
from homepage.config import Settings
from homepage.dependencies.database import get_app_settings
from homepage.database.connections import DatabaseConnection, mask_connection_string
from homepage.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

PROCESS_STARTED_AT = time.monotonic()
RECENT_USERS_LIMIT = 5


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _optional_connection(request: Request) -> Optional[DatabaseConnection]:
    return getattr(request.app.state, "db", None)


@router.get(
    "/ping",
    response_class=PlainTextResponse,
    summary="Liveness ping",
)
async def ping():
    """Plain text ``pong``; the most basic liveness check."""
    return "pong"


@router.get("/api", summary="API information")
async def api_info():
    """Server metadata and endpoint directory."""
    return {
        "success": True,
        "message": "Starbucks Korea API Server",
        "version": __version__,
        "status": "running",
        "timestamp": _timestamp(),
        "endpoints": {
            "ping": "/ping",
            "health": "/api/health",
            "dbStatus": "/api/db-status",
            "auth": {
                "register": "POST /api/auth/register",
                "login": "POST /api/auth/login",
                "checkEmail": "GET /api/auth/check-email",
            },
        },
    }


@router.get(
    "/api/health",
    status_code=status.HTTP_200_OK,
    summary="Health check with database state",
)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_app_settings),
):
    """
    Health check endpoint.

    Always returns 200 while the API is running; the database block
    degrades to ``connected: false`` when MongoDB is unavailable.
    """
    connection = _optional_connection(request)
    if connection is None:
        database = {"connected": False, "status": "not_initialized"}
    else:
        try:
            info = connection.get_connection_info()
            database = {
                "connected": info.is_connected,
                "name": info.database or "unknown",
                "readyState": info.ready_state,
                "type": info.connection_type,
            }
        except Exception as e:
            logger.warning(f"Connection info unavailable: {e}")
            database = {"connected": False, "status": "connection_info_unavailable"}

    return {
        "success": True,
        "status": "healthy",
        "timestamp": _timestamp(),
        "server": {
            "environment": settings.environment_label,
            "port": settings.port,
            "uptime": round(time.monotonic() - PROCESS_STARTED_AT, 3),
        },
        "database": database,
    }


@router.get("/api/db-status", summary="Database status and user summary")
async def db_status(
    request: Request,
    settings: Settings = Depends(get_app_settings),
):
    """
    Database status for development: masked endpoint, user count and the
    most recent registrations.
    """
    connection = _optional_connection(request)
    try:
        if connection is None:
            raise RuntimeError("Database connection not initialized")

        info = connection.get_connection_info()
        auth_service = AuthService(connection.get_database(), settings)
        total_count = await auth_service.count_users()
        recent_users = await auth_service.list_recent_users(RECENT_USERS_LIMIT)
    except Exception as e:
        logger.error(f"DB status check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": mask_connection_string(str(e)),
                "database": {"connected": False},
            },
        )

    return {
        "success": True,
        "database": {
            "connected": info.is_connected,
            "name": info.database,
            "type": info.connection_type,
            "connectionString": info.connection_string,
        },
        "users": {
            "totalCount": total_count,
            "recentUsers": [
                user.model_dump(by_alias=True, mode="json") for user in recent_users
            ],
        },
        "timestamp": _timestamp(),
    }
