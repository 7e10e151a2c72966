"""Shared test fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.gs_common.database import get_db_session
from src.main import app


@pytest.fixture
def mock_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
async def client(mock_db: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for FastAPI endpoints; the DB session is replaced by mock_db."""

    async def _override_db() -> AsyncGenerator[MagicMock, None]:
        yield mock_db

    app.dependency_overrides[get_db_session] = _override_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
