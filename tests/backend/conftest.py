"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with helpers for failure paths:
an unreachable MongoDB and a fully mocked users collection.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))

from factories import make_driver_client, make_settings  # noqa: E402


# =============================================================================
# Unreachable Database Fixtures
# =============================================================================

@pytest.fixture
def unreachable_client_factory():
    """Client factory whose clients never answer the connection check."""
    def _factory(*args, **kwargs):
        return make_driver_client(
            ping_error=ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")
        )
    return MagicMock(side_effect=_factory)


@pytest.fixture
def make_unreachable_app(unreachable_client_factory):
    """
    Factory for apps whose database is down.

    Usage:
        app = make_unreachable_app(environment="development")
    """
    from homepage.database.connections import DatabaseConnection
    from homepage.main import create_app

    def _make(**overrides):
        settings = make_settings(**overrides)
        connection = DatabaseConnection(settings, client_factory=unreachable_client_factory)
        return create_app(settings=settings, connection=connection)

    return _make


@pytest.fixture
def degraded_client(make_unreachable_app):
    """Development-mode client running without a database."""
    app = make_unreachable_app(environment="development")
    with TestClient(app) as c:
        yield c


# =============================================================================
# Auth Service Fixtures
# =============================================================================

@pytest.fixture
def mock_users_collection():
    """
    A users collection where every operation is an AsyncMock.

    Lets tests assert that no database call happened.
    """
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def mocked_auth_service(test_settings, mock_users_collection):
    """AuthService whose users collection is ``mock_users_collection``."""
    from homepage.services.auth_service import AuthService

    db = MagicMock()
    db.__getitem__.return_value = mock_users_collection
    return AuthService(db, test_settings)


@pytest.fixture
def auth_service(indexed_site_db, test_settings):
    """AuthService backed by the indexed mock site database."""
    from homepage.services.auth_service import AuthService

    return AuthService(indexed_site_db, test_settings)
