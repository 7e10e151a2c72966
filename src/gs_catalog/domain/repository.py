"""Repository Protocol — read-only catalog access.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_catalog.domain.models import Game


class CatalogRepositoryProtocol(Protocol):
    async def get_game_by_id(self, db: AsyncSession, game_id: str) -> Game | None: ...
