"""LibraryApplicationService — read-only views over the ownership store."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_common.datetime_utils import isoformat_or_empty
from src.gs_common.pagination import cursor_decode, cursor_encode
from src.gs_library.application.schemas import (
    LibraryEntryItem,
    LibraryResponse,
    OwnershipResponse,
)
from src.gs_library.domain.repository import OwnershipRepositoryProtocol
from src.gs_library.infrastructure.persistence import OwnershipRepository


class LibraryApplicationService:
    def __init__(self, repo: OwnershipRepositoryProtocol | None = None) -> None:
        self._repo: OwnershipRepositoryProtocol = repo or OwnershipRepository()

    async def list_library(
        self, db: AsyncSession, user_id: str, cursor: str | None, limit: int
    ) -> LibraryResponse:
        decoded = cursor_decode(cursor)
        last_id = decoded if isinstance(decoded, str) else None
        entries = await self._repo.list_for_user(db, user_id, last_id, limit + 1)
        has_more = len(entries) > limit
        page = entries[:limit]
        items = [
            LibraryEntryItem(
                id=e.id,
                game_id=e.game_id,
                acquired_at=isoformat_or_empty(e.acquired_at),
            )
            for e in page
        ]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LibraryResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def is_owned(self, db: AsyncSession, user_id: str, game_id: str) -> OwnershipResponse:
        owned = await self._repo.exists(db, user_id, game_id)
        return OwnershipResponse(game_id=game_id, owned=owned)
