"""Repository Protocols — dependency inversion for testability.

Unit tests inject a mock that conforms to these Protocols.
Infrastructure layer provides the real implementation.

WalletRepositoryProtocol deliberately has no add/subtract method: a balance
may only be written from an account loaded with load_for_update in the same
transaction.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_account.domain.models import LedgerEntry, WalletAccount


class WalletRepositoryProtocol(Protocol):
    async def get_balance(self, db: AsyncSession, user_id: str) -> int | None: ...

    async def load_for_update(
        self, db: AsyncSession, user_id: str
    ) -> WalletAccount | None: ...

    async def set_balance(
        self, db: AsyncSession, account: WalletAccount, new_balance: int
    ) -> WalletAccount: ...


class LedgerRepositoryProtocol(Protocol):
    async def append(
        self,
        db: AsyncSession,
        user_id: str,
        entry_type: str,
        amount: int,
        balance_after: int,
        game_id: str | None,
        description: str,
    ) -> LedgerEntry: ...

    async def list_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...

    async def sum_for_user(self, db: AsyncSession, user_id: str) -> int: ...
