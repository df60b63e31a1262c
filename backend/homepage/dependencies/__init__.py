"""
Dependencies for dependency injection in routes.
"""
from homepage.dependencies.database import (
    get_app_settings,
    get_auth_service,
    get_db_connection,
)

__all__ = [
    "get_app_settings",
    "get_auth_service",
    "get_db_connection",
]
