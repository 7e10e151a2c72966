"""OwnershipRepository and WishlistRepository — raw SQL over library_entries / wishlist_entries.

Runs on the caller's session; never commits.

The library insert uses ON CONFLICT DO NOTHING against uq_library_user_game.
Zero returned rows means another transaction already owns the pair, so the
caller reports AlreadyOwned without the transaction being aborted by a
unique-violation error.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_library.domain.models import LibraryEntry

_EXISTS_LIBRARY_SQL = text("""
    SELECT EXISTS (
        SELECT 1 FROM library_entries WHERE user_id = :user_id AND game_id = :game_id
    )
""")

_INSERT_LIBRARY_SQL = text("""
    INSERT INTO library_entries (id, user_id, game_id, acquired_at)
    VALUES (:id, :user_id, :game_id, :acquired_at)
    ON CONFLICT ON CONSTRAINT uq_library_user_game DO NOTHING
    RETURNING id, user_id, game_id, acquired_at
""")

_LIST_LIBRARY_SQL = text("""
    SELECT l.id, l.user_id, l.game_id, l.acquired_at
    FROM library_entries l
    WHERE l.user_id = :user_id
      AND (
          CAST(:cursor AS TEXT) IS NULL
          OR (l.acquired_at, l.id) < (
              SELECT c.acquired_at, c.id FROM library_entries c
              WHERE c.id = CAST(:cursor AS TEXT) AND c.user_id = :user_id
          )
      )
    ORDER BY l.acquired_at DESC, l.id DESC
    LIMIT :limit
""")

_EXISTS_WISHLIST_SQL = text("""
    SELECT EXISTS (
        SELECT 1 FROM wishlist_entries WHERE user_id = :user_id AND game_id = :game_id
    )
""")

_DELETE_WISHLIST_SQL = text("""
    DELETE FROM wishlist_entries
    WHERE user_id = :user_id AND game_id = :game_id
    RETURNING id
""")


def _row_to_entry(row: object) -> LibraryEntry:
    return LibraryEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        game_id=row.game_id,  # type: ignore[attr-defined]
        acquired_at=row.acquired_at,  # type: ignore[attr-defined]
    )


class OwnershipRepository:
    async def exists(self, db: AsyncSession, user_id: str, game_id: str) -> bool:
        result = await db.execute(
            _EXISTS_LIBRARY_SQL, {"user_id": user_id, "game_id": game_id}
        )
        return bool(result.scalar_one())

    async def insert(self, db: AsyncSession, entry: LibraryEntry) -> LibraryEntry | None:
        result = await db.execute(
            _INSERT_LIBRARY_SQL,
            {
                "id": entry.id,
                "user_id": entry.user_id,
                "game_id": entry.game_id,
                "acquired_at": entry.acquired_at,
            },
        )
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
    ) -> list[LibraryEntry]:
        result = await db.execute(
            _LIST_LIBRARY_SQL, {"user_id": user_id, "cursor": cursor, "limit": limit}
        )
        return [_row_to_entry(row) for row in result.fetchall()]


class WishlistRepository:
    async def exists(self, db: AsyncSession, user_id: str, game_id: str) -> bool:
        result = await db.execute(
            _EXISTS_WISHLIST_SQL, {"user_id": user_id, "game_id": game_id}
        )
        return bool(result.scalar_one())

    async def delete(self, db: AsyncSession, user_id: str, game_id: str) -> bool:
        """Remove the (user, game) marker if present. Returns whether a row was removed."""
        result = await db.execute(
            _DELETE_WISHLIST_SQL, {"user_id": user_id, "game_id": game_id}
        )
        return result.fetchone() is not None
