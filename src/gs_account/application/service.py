"""WalletApplicationService — balance, top-up, payment history, reconciliation.

top_up owns its transaction: lock the wallet, credit it, append a TOP_UP
ledger entry, then commit; any failure rolls the whole thing back.
Read operations run without an explicit transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_account.application.schemas import (
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    ReconciliationResponse,
    TopUpResponse,
)
from src.gs_account.domain.repository import (
    LedgerRepositoryProtocol,
    WalletRepositoryProtocol,
)
from src.gs_account.infrastructure.persistence import LedgerRepository, WalletRepository
from src.gs_common.cents import cents_to_display, validate_amount
from src.gs_common.datetime_utils import isoformat_or_empty
from src.gs_common.enums import LedgerEntryType
from src.gs_common.errors import AccountNotFoundError
from src.gs_common.pagination import cursor_decode, cursor_encode

logger = logging.getLogger(__name__)

DEFAULT_TOP_UP_DESCRIPTION = "Wallet top-up"


class WalletApplicationService:
    def __init__(
        self,
        wallet_repo: WalletRepositoryProtocol | None = None,
        ledger_repo: LedgerRepositoryProtocol | None = None,
    ) -> None:
        self._wallet: WalletRepositoryProtocol = wallet_repo or WalletRepository()
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        balance = await self._wallet.get_balance(db, user_id)
        if balance is None:
            raise AccountNotFoundError(user_id)
        return BalanceResponse.from_cents(user_id=user_id, balance=balance)

    async def top_up(
        self,
        db: AsyncSession,
        user_id: str,
        amount_cents: int,
        description: str | None = None,
    ) -> TopUpResponse:
        validate_amount(amount_cents)
        try:
            account = await self._wallet.load_for_update(db, user_id)
            if account is None:
                raise AccountNotFoundError(user_id)
            account = await self._wallet.set_balance(
                db, account, account.balance + amount_cents
            )
            entry = await self._ledger.append(
                db,
                user_id=user_id,
                entry_type=LedgerEntryType.TOP_UP.value,
                amount=amount_cents,
                balance_after=account.balance,
                game_id=None,
                description=(description or "").strip() or DEFAULT_TOP_UP_DESCRIPTION,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Wallet top-up: user=%s amount=%d balance=%d entry=%d",
            user_id, amount_cents, account.balance, entry.id,
        )
        return TopUpResponse.from_result(
            balance=account.balance, amount=amount_cents, entry_id=entry.id
        )

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        decoded = cursor_decode(cursor)
        cursor_id = decoded if isinstance(decoded, int) else None
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._ledger.list_entries(
            db, user_id, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=LedgerEntryType(e.entry_type),
                game_id=e.game_id,
                amount_cents=e.amount,
                amount_display=cents_to_display(e.amount),
                balance_after_cents=e.balance_after,
                description=e.description,
                created_at=isoformat_or_empty(e.created_at),
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def reconcile(self, db: AsyncSession, user_id: str) -> ReconciliationResponse:
        """Compare the stored balance with the sum of the user's ledger entries."""
        balance = await self._wallet.get_balance(db, user_id)
        if balance is None:
            raise AccountNotFoundError(user_id)
        ledger_total = await self._ledger.sum_for_user(db, user_id)
        consistent = balance == ledger_total
        if not consistent:
            logger.error(
                "Ledger mismatch: user=%s balance=%d ledger_total=%d",
                user_id, balance, ledger_total,
            )
        return ReconciliationResponse(
            user_id=user_id,
            balance_cents=balance,
            ledger_total_cents=ledger_total,
            consistent=consistent,
        )
