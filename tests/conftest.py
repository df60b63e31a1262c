"""
Global test fixtures for the Starbucks Homepage backend.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- A stand-in Motor client for the connection manager
- Test settings and user payloads
- FastAPI test clients wired to the mock database
"""

import sys
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend and shared test helpers to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))
sys.path.insert(0, str(Path(__file__).parent))

from factories import ADMIN_EMAIL, make_driver_client, make_settings  # noqa: E402


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def test_settings():
    """Settings for a non-production, non-development environment."""
    return make_settings()


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest.fixture
def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest.fixture
def mock_site_db(mock_async_mongo_client):
    """Provide mock site database (indexes are created by the code under test)."""
    return mock_async_mongo_client["starbucks"]


@pytest_asyncio.fixture
async def indexed_site_db(mock_site_db):
    """Mock site database with the real indexes applied."""
    from homepage.database.indexes import create_indexes

    await create_indexes(mock_site_db)
    yield mock_site_db


@pytest.fixture
def driver_client(mock_site_db):
    """A reachable stand-in client backed by the mock site database."""
    return make_driver_client(mock_site_db)


@pytest.fixture
def client_factory(driver_client):
    """Client factory that always returns ``driver_client``."""
    return MagicMock(return_value=driver_client)


@pytest.fixture
def db_connection(test_settings, client_factory):
    """DatabaseConnection wired to the stand-in client."""
    from homepage.database.connections import DatabaseConnection

    return DatabaseConnection(test_settings, client_factory=client_factory)


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Basic test user data for registration."""
    return {
        "email": "Jo@Example.com",
        "name": "Jo",
        "password": "SecurePassword123!",
        "address": "  Seoul, Jung-gu  ",
    }


@pytest.fixture
def test_admin_data() -> dict:
    """Registration data for an allow-listed admin."""
    return {
        "email": ADMIN_EMAIL.upper(),
        "name": "Store Manager",
        "password": "AdminPassword123!",
    }


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app(test_settings, db_connection):
    """
    Create FastAPI app for testing, connected to the mock database.
    """
    from homepage.main import create_app

    return create_app(settings=test_settings, connection=db_connection)


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Entering the client runs the lifespan (connect + indexes).
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture
def registered_user(client, test_user_data) -> dict:
    """Register ``test_user_data`` through the API and return the payload."""
    response = client.post("/api/auth/register", json=test_user_data)
    assert response.status_code == 201
    return test_user_data
