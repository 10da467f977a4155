"""
Biodex Backend - Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    ├── mock_db_session:  AsyncMock standing in for AsyncSession (no real DB)
    ├── author_id / other_user_id: two distinct signed-in users
    ├── make_species:     factory for SpeciesResponse records
    ├── lion:             the Panthera leo record owned by author_id
    ├── notifications:    a fresh NotificationQueue
    └── client_for:       HTTPX AsyncClient bound to the app, signed in as a
                          given user (or signed out with None)
"""

import os
import uuid
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["AUTH_JWT_SECRET"] = "test-jwt-secret-not-real-0123456789abcdef"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.auth import Session, get_current_session
from app.database import get_db_session
from app.models.species import Kingdom
from app.schemas.species import SpeciesResponse
from app.services.notifications import NotificationQueue

AUTHOR_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
OTHER_USER_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def author_id() -> uuid.UUID:
    return AUTHOR_ID


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return OTHER_USER_ID


@pytest.fixture
def make_species() -> Callable[..., SpeciesResponse]:
    """Build a SpeciesResponse, overriding any field by keyword."""

    def _make(**overrides: Any) -> SpeciesResponse:
        data = {
            "id": 1,
            "scientific_name": "Panthera leo",
            "common_name": "Lion",
            "kingdom": Kingdom.ANIMALIA,
            "total_population": 23000,
            "image": None,
            "description": None,
            "endangered": False,
            "author": AUTHOR_ID,
        }
        data.update(overrides)
        return SpeciesResponse(**data)

    return _make


@pytest.fixture
def lion(make_species) -> SpeciesResponse:
    return make_species()


@pytest.fixture
def notifications() -> NotificationQueue:
    return NotificationQueue()


@pytest_asyncio.fixture
async def client_for(mock_db_session):
    """
    Factory fixture returning an AsyncClient signed in as `user_id`.

    Usage:
        client = await client_for(author_id)
        response = await client.get("/species")

    Pass None for a signed-out visitor. The database dependency always
    yields mock_db_session; tests patch the service singletons for data.
    """
    from app.main import app

    clients = []

    async def _override_db():
        yield mock_db_session

    async def _make(user_id: Optional[uuid.UUID]) -> AsyncClient:
        session = Session(user_id=user_id) if user_id is not None else None

        async def _override_session() -> Optional[Session]:
            return session

        app.dependency_overrides[get_db_session] = _override_db
        app.dependency_overrides[get_current_session] = _override_session
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()
    app.dependency_overrides.clear()
