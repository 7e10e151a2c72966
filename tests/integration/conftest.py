"""Integration-test fixtures (requires a migrated PostgreSQL: alembic upgrade head).

All integration tests share a single event loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session. Every test is skipped when the database is not
reachable.
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError

from src.gs_common.database import engine
from src.main import app
from tests.integration.db_helpers import execute_sql


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def database() -> None:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM users LIMIT 1"))
    except (OSError, OperationalError, DBAPIError) as exc:
        pytest.skip(f"PostgreSQL not available: {exc}")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def new_user(database: None) -> Callable[[], Awaitable[str]]:
    """Insert a fresh user with an empty wallet and return its id."""

    async def _create() -> str:
        user_id = f"it_{uuid.uuid4().hex[:12]}"
        await execute_sql(
            "INSERT INTO users (id, nickname) VALUES (:id, :nickname)",
            {"id": user_id, "nickname": user_id},
        )
        return user_id

    return _create


@pytest.fixture
def new_game(database: None) -> Callable[..., Awaitable[str]]:
    """Insert a catalog game and return its id."""

    async def _create(
        price: int,
        sale_price: int = 0,
        name: str = "Integration Game",
        base_game_id: str | None = None,
    ) -> str:
        game_id = f"g_{uuid.uuid4().hex[:12]}"
        await execute_sql(
            """
            INSERT INTO games (id, name, price, sale_price, is_dlc, base_game_id)
            VALUES (:id, :name, :price, :sale_price, :is_dlc, :base_game_id)
            """,
            {
                "id": game_id,
                "name": name,
                "price": price,
                "sale_price": sale_price,
                "is_dlc": base_game_id is not None,
                "base_game_id": base_game_id,
            },
        )
        return game_id

    return _create
