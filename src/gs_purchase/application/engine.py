"""PurchaseEngine — one atomic purchase attempt on the caller's session.

Checks, in order, each short-circuiting before any write:
  1. game exists
  2. user does not already own it
  3. effective price (0 = free, no wallet or ledger movement)
  4. DLC requires the base game in the library
  5. paid: wallet row locked FOR UPDATE and balance >= price

Then, in the same transaction: debit, library insert, wishlist cleanup,
PURCHASE ledger entry, commit. Business failures come back as a failed
PurchaseOutcome; they are never raised past purchase().

Two concurrent purchases of the same (user, game) are decided by the library
unique constraint: the loser's insert returns no row and it rolls back with
AlreadyOwned. Paid purchases of one user are additionally serialized by the
wallet row lock.
"""

import asyncio
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.gs_account.domain.repository import (
    LedgerRepositoryProtocol,
    WalletRepositoryProtocol,
)
from src.gs_account.infrastructure.persistence import LedgerRepository, WalletRepository
from src.gs_catalog.domain.repository import CatalogRepositoryProtocol
from src.gs_catalog.infrastructure.persistence import CatalogRepository
from src.gs_common.background import DetachedTaskRunner, detached_tasks
from src.gs_common.datetime_utils import utc_now
from src.gs_common.enums import LedgerEntryType
from src.gs_common.errors import (
    AlreadyOwnedError,
    BaseGameRequiredError,
    GameNotFoundError,
    InsufficientFundsError,
    PurchaseError,
    TransactionFailedError,
)
from src.gs_library.domain.models import LibraryEntry
from src.gs_library.domain.repository import (
    OwnershipRepositoryProtocol,
    WishlistRepositoryProtocol,
)
from src.gs_library.infrastructure.persistence import (
    OwnershipRepository,
    WishlistRepository,
)
from src.gs_purchase.domain.badges import BadgeEvaluator, build_badge_evaluator
from src.gs_purchase.domain.models import PurchaseOutcome, PurchaseReceipt

logger = logging.getLogger(__name__)

GENERIC_PURCHASE_DESCRIPTION = "Game purchase"


class PurchaseEngine:
    def __init__(
        self,
        catalog_repo: CatalogRepositoryProtocol | None = None,
        wallet_repo: WalletRepositoryProtocol | None = None,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        library_repo: OwnershipRepositoryProtocol | None = None,
        wishlist_repo: WishlistRepositoryProtocol | None = None,
        badges: BadgeEvaluator | None = None,
        tasks: DetachedTaskRunner | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._catalog: CatalogRepositoryProtocol = catalog_repo or CatalogRepository()
        self._wallet: WalletRepositoryProtocol = wallet_repo or WalletRepository()
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._library: OwnershipRepositoryProtocol = library_repo or OwnershipRepository()
        self._wishlist: WishlistRepositoryProtocol = wishlist_repo or WishlistRepository()
        self._badges: BadgeEvaluator = badges or build_badge_evaluator()
        self._tasks = tasks or detached_tasks
        self._timeout = (
            timeout_seconds if timeout_seconds is not None
            else settings.PURCHASE_TIMEOUT_SECONDS
        )

    async def purchase(
        self, db: AsyncSession, user_id: str, game_id: str
    ) -> PurchaseOutcome:
        try:
            async with asyncio.timeout(self._timeout):
                receipt = await self._run_unit_of_work(db, user_id, game_id)
        except PurchaseError as exc:
            await self._rollback(db)
            logger.info(
                "Purchase rejected: user=%s game=%s kind=%s",
                user_id, game_id, exc.kind.value,
            )
            return PurchaseOutcome.failed(exc)
        except asyncio.CancelledError:
            await self._rollback(db)
            raise
        except Exception as exc:
            logger.exception("Purchase failed: user=%s game=%s", user_id, game_id)
            await self._rollback(db)
            return PurchaseOutcome.failed(TransactionFailedError(exc))

        # Once started, the commit runs to completion even if the caller is cancelled.
        commit = asyncio.ensure_future(db.commit())
        try:
            await asyncio.shield(commit)
        except asyncio.CancelledError:
            await asyncio.wait([commit])
            if not commit.cancelled() and commit.exception() is None:
                self._schedule_badge_evaluation(user_id)
            else:
                await self._rollback(db)
            raise
        except Exception as exc:
            logger.exception("Purchase commit failed: user=%s game=%s", user_id, game_id)
            await self._rollback(db)
            return PurchaseOutcome.failed(TransactionFailedError(exc))

        logger.info(
            "Purchase completed: user=%s game=%s price=%d balance=%d",
            user_id, game_id, receipt.price_paid, receipt.new_balance,
        )
        self._schedule_badge_evaluation(user_id)
        return PurchaseOutcome.succeeded(receipt)

    async def _run_unit_of_work(
        self, db: AsyncSession, user_id: str, game_id: str
    ) -> PurchaseReceipt:
        game = await self._catalog.get_game_by_id(db, game_id)
        if game is None:
            raise GameNotFoundError(game_id)

        if await self._library.exists(db, user_id, game_id):
            raise AlreadyOwnedError(game_id)

        price = game.effective_price

        if game.is_dlc:
            if game.base_game_id is None:
                raise BaseGameRequiredError(game_id, None)
            if not await self._library.exists(db, user_id, game.base_game_id):
                raise BaseGameRequiredError(game_id, game.base_game_id)

        if price > 0:
            account = await self._wallet.load_for_update(db, user_id)
            available = account.balance if account is not None else 0
            if account is None or available < price:
                raise InsufficientFundsError(required=price, available=available)
            account = await self._wallet.set_balance(db, account, account.balance - price)
            new_balance = account.balance
        else:
            balance = await self._wallet.get_balance(db, user_id)
            new_balance = balance if balance is not None else 0

        entry = await self._library.insert(
            db,
            LibraryEntry(
                id=str(uuid.uuid4()),
                user_id=user_id,
                game_id=game_id,
                acquired_at=utc_now(),
            ),
        )
        if entry is None:
            raise AlreadyOwnedError(game_id)

        wishlist_removed = await self._wishlist.delete(db, user_id, game_id)

        ledger_entry_id: int | None = None
        if price > 0:
            ledger_entry = await self._ledger.append(
                db,
                user_id=user_id,
                entry_type=LedgerEntryType.PURCHASE.value,
                amount=-price,
                balance_after=new_balance,
                game_id=game_id,
                description=(game.name or "").strip() or GENERIC_PURCHASE_DESCRIPTION,
            )
            ledger_entry_id = ledger_entry.id

        return PurchaseReceipt(
            library_entry_id=entry.id,
            game_id=game_id,
            price_paid=price,
            new_balance=new_balance,
            ledger_entry_id=ledger_entry_id,
            wishlist_removed=wishlist_removed,
        )

    def _schedule_badge_evaluation(self, user_id: str) -> None:
        try:
            self._tasks.spawn(
                self._badges.evaluate_and_award(user_id), name=f"badges:{user_id}"
            )
        except Exception:
            logger.exception("Could not schedule badge evaluation: user=%s", user_id)

    @staticmethod
    async def _rollback(db: AsyncSession) -> None:
        try:
            await db.rollback()
        except Exception:
            logger.exception("Rollback failed")


_engine: PurchaseEngine | None = None


def get_purchase_engine() -> PurchaseEngine:
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = PurchaseEngine()
    return _engine
