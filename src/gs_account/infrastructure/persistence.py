"""WalletRepository and LedgerRepository — raw SQL over users / ledger_entries.

Transaction ownership: the CALLER (purchase engine or wallet service) opens,
commits and rolls back the transaction. Every method here runs on the
caller's session and never commits.

Lost-update protection is two-layered: load_for_update takes a row lock
(SELECT ... FOR UPDATE), and set_balance only writes when the row still has
the version seen at load time. A result of 0 rows means the account changed
underneath us, which aborts the unit of work.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_account.domain.models import LedgerEntry, WalletAccount
from src.gs_common.errors import InternalError

# ---------------------------------------------------------------------------
# SQL: wallet
# ---------------------------------------------------------------------------

_GET_BALANCE_SQL = text("""
    SELECT balance FROM users WHERE id = :user_id
""")

_LOAD_FOR_UPDATE_SQL = text("""
    SELECT id AS user_id, balance, version
    FROM users
    WHERE id = :user_id
    FOR UPDATE
""")

_SET_BALANCE_SQL = text("""
    UPDATE users
    SET balance = :new_balance,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :user_id AND version = :version
    RETURNING id AS user_id, balance, version
""")

# ---------------------------------------------------------------------------
# SQL: ledger (append-only, no UPDATE or DELETE statements exist for it)
# ---------------------------------------------------------------------------

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, game_id, entry_type, amount, balance_after, description)
    VALUES
        (:user_id, :game_id, :entry_type, :amount, :balance_after, :description)
    RETURNING id, user_id, game_id, entry_type, amount, balance_after,
              description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_id, game_id, entry_type, amount, balance_after,
           description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = CAST(:entry_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")

_SUM_LEDGER_SQL = text("""
    SELECT COALESCE(SUM(amount), 0) FROM ledger_entries WHERE user_id = :user_id
""")


def _row_to_account(row: object) -> WalletAccount:
    return WalletAccount(
        user_id=row.user_id,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
    )


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        game_id=row.game_id,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class WalletRepository:
    async def get_balance(self, db: AsyncSession, user_id: str) -> int | None:
        """Plain read for display. Never feed the result into set_balance."""
        result = await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return row.balance if row else None

    async def load_for_update(
        self, db: AsyncSession, user_id: str
    ) -> WalletAccount | None:
        result = await db.execute(_LOAD_FOR_UPDATE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def set_balance(
        self, db: AsyncSession, account: WalletAccount, new_balance: int
    ) -> WalletAccount:
        if new_balance < 0:
            raise InternalError(
                f"Refusing to write negative balance {new_balance} for user {account.user_id}"
            )
        result = await db.execute(
            _SET_BALANCE_SQL,
            {
                "user_id": account.user_id,
                "new_balance": new_balance,
                "version": account.version,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(
                f"Wallet for user {account.user_id} changed since load (version {account.version})"
            )
        return _row_to_account(row)


class LedgerRepository:
    async def append(
        self,
        db: AsyncSession,
        user_id: str,
        entry_type: str,
        amount: int,
        balance_after: int,
        game_id: str | None,
        description: str,
    ) -> LedgerEntry:
        result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": user_id,
                "game_id": game_id,
                "entry_type": entry_type,
                "amount": amount,
                "balance_after": balance_after,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows")
        return _row_to_ledger(row)

    async def list_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "entry_type": entry_type,
                "limit": limit,
            },
        )
        return [_row_to_ledger(row) for row in result.fetchall()]

    async def sum_for_user(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(_SUM_LEDGER_SQL, {"user_id": user_id})
        return int(result.scalar_one())
