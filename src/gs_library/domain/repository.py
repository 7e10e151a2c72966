"""Repository Protocols for ownership and wishlist stores.

OwnershipRepositoryProtocol.insert returns None when the (user, game) pair
already exists. That return value, not the earlier exists() check, decides
which of two racing purchases wins.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_library.domain.models import LibraryEntry


class OwnershipRepositoryProtocol(Protocol):
    async def exists(self, db: AsyncSession, user_id: str, game_id: str) -> bool: ...

    async def insert(self, db: AsyncSession, entry: LibraryEntry) -> LibraryEntry | None: ...

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
    ) -> list[LibraryEntry]: ...


class WishlistRepositoryProtocol(Protocol):
    async def exists(self, db: AsyncSession, user_id: str, game_id: str) -> bool: ...

    async def delete(self, db: AsyncSession, user_id: str, game_id: str) -> bool: ...
