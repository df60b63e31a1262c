"""
Dependencies resolving the shared connection manager and services.
"""
from fastapi import Depends, Request

from homepage.config import Settings
from homepage.database.connections import DatabaseConnection
from homepage.services.auth_service import AuthService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_db_connection(request: Request) -> DatabaseConnection:
    """The DatabaseConnection created with the application."""
    return request.app.state.db


def get_auth_service(
    connection: DatabaseConnection = Depends(get_db_connection),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    """
    Dependency to get AuthService instance.

    The database handle is resolved by the service on first store access;
    a request that fails validation never touches the connection.
    """
    return AuthService(settings=settings, connection=connection)
