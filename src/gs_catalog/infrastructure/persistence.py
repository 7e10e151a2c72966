"""CatalogRepository — concrete implementation of CatalogRepositoryProtocol.

Runs on the caller's session so the purchase engine reads the game inside its
own transaction, exactly once per attempt.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_catalog.domain.models import Game
from src.gs_catalog.infrastructure.db_models import GameORM


def _orm_to_game(row: GameORM) -> Game:
    return Game(
        id=row.id,
        name=row.name,
        price=row.price,
        sale_price=row.sale_price,
        is_dlc=row.is_dlc,
        base_game_id=row.base_game_id,
    )


class CatalogRepository:
    async def get_game_by_id(self, db: AsyncSession, game_id: str) -> Game | None:
        result = await db.execute(select(GameORM).where(GameORM.id == game_id))
        row = result.scalar_one_or_none()
        return _orm_to_game(row) if row else None
