"""Unit tests for WalletApplicationService using mock repositories."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.gs_account.application.schemas import BalanceResponse, TopUpResponse
from src.gs_account.application.service import (
    DEFAULT_TOP_UP_DESCRIPTION,
    WalletApplicationService,
)
from src.gs_account.domain.models import LedgerEntry, WalletAccount
from src.gs_common.enums import LedgerEntryType
from src.gs_common.errors import AccountNotFoundError, InternalError
from src.gs_common.pagination import cursor_decode, cursor_encode


def _make_account(balance: int = 1000, version: int = 1) -> WalletAccount:
    return WalletAccount(user_id="u-1", balance=balance, version=version)


def _make_entry(
    entry_id: int = 1,
    amount: int = 500,
    balance_after: int = 1500,
    entry_type: str = "TOP_UP",
    game_id: str | None = None,
) -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        user_id="u-1",
        entry_type=entry_type,
        amount=amount,
        balance_after=balance_after,
        game_id=game_id,
        description="x",
        created_at=datetime.now(UTC),
    )


def _db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


class TestGetBalance:
    async def test_returns_balance(self) -> None:
        wallet = AsyncMock()
        wallet.get_balance.return_value = 120050
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=AsyncMock())

        result = await svc.get_balance(_db(), "u-1")

        assert isinstance(result, BalanceResponse)
        assert result.balance_cents == 120050
        assert result.balance_display.startswith("1,200.50")

    async def test_missing_account(self) -> None:
        wallet = AsyncMock()
        wallet.get_balance.return_value = None
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=AsyncMock())

        with pytest.raises(AccountNotFoundError):
            await svc.get_balance(_db(), "ghost")


class TestTopUp:
    async def test_credits_and_commits(self) -> None:
        wallet = AsyncMock()
        wallet.load_for_update.return_value = _make_account(1000, version=2)
        wallet.set_balance.return_value = _make_account(1500, version=3)
        ledger = AsyncMock()
        ledger.append.return_value = _make_entry(11, 500, 1500)
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=ledger)
        db = _db()

        result = await svc.top_up(db, "u-1", 500, None)

        assert isinstance(result, TopUpResponse)
        assert result.balance_cents == 1500
        assert result.credited_cents == 500
        assert result.ledger_entry_id == 11
        wallet.set_balance.assert_awaited_once_with(db, _make_account(1000, 2), 1500)
        kwargs = ledger.append.call_args.kwargs
        assert kwargs["entry_type"] == LedgerEntryType.TOP_UP.value
        assert kwargs["game_id"] is None
        assert kwargs["balance_after"] == 1500
        assert kwargs["description"] == DEFAULT_TOP_UP_DESCRIPTION
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    async def test_custom_description(self) -> None:
        wallet = AsyncMock()
        wallet.load_for_update.return_value = _make_account(0)
        wallet.set_balance.return_value = _make_account(100)
        ledger = AsyncMock()
        ledger.append.return_value = _make_entry(1, 100, 100)
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=ledger)

        await svc.top_up(_db(), "u-1", 100, "  Gift card  ")

        assert ledger.append.call_args.kwargs["description"] == "Gift card"

    async def test_non_positive_amount_rejected_before_db(self) -> None:
        wallet = AsyncMock()
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=AsyncMock())
        db = _db()

        with pytest.raises(ValueError):
            await svc.top_up(db, "u-1", 0)
        wallet.load_for_update.assert_not_awaited()

    async def test_missing_account_rolls_back(self) -> None:
        wallet = AsyncMock()
        wallet.load_for_update.return_value = None
        ledger = AsyncMock()
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=ledger)
        db = _db()

        with pytest.raises(AccountNotFoundError):
            await svc.top_up(db, "ghost", 100)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
        ledger.append.assert_not_awaited()

    async def test_ledger_failure_rolls_back_balance(self) -> None:
        wallet = AsyncMock()
        wallet.load_for_update.return_value = _make_account(0)
        wallet.set_balance.return_value = _make_account(100)
        ledger = AsyncMock()
        ledger.append.side_effect = InternalError("Ledger insert returned no rows")
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=ledger)
        db = _db()

        with pytest.raises(InternalError):
            await svc.top_up(db, "u-1", 100)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()


class TestListLedger:
    async def test_has_more_and_cursor(self) -> None:
        ledger = AsyncMock()
        ledger.list_entries.return_value = [
            _make_entry(5, -800, 200, "PURCHASE", "g-1"),
            _make_entry(4, 1000, 1000),
            _make_entry(3, 1000, 1000),
        ]
        svc = WalletApplicationService(wallet_repo=AsyncMock(), ledger_repo=ledger)

        result = await svc.list_ledger(_db(), "u-1", None, 2, None)

        assert result.has_more is True
        assert [i.id for i in result.items] == [5, 4]
        assert result.items[0].entry_type is LedgerEntryType.PURCHASE
        assert result.items[0].amount_display.startswith("-8.00")
        assert cursor_decode(result.next_cursor) == 4
        # limit + 1 fetched to detect the next page
        assert ledger.list_entries.call_args[0][3] == 3

    async def test_last_page(self) -> None:
        ledger = AsyncMock()
        ledger.list_entries.return_value = [_make_entry(1)]
        svc = WalletApplicationService(wallet_repo=AsyncMock(), ledger_repo=ledger)

        result = await svc.list_ledger(_db(), "u-1", cursor_encode(2), 20, "TOP_UP")

        assert result.has_more is False
        assert result.next_cursor is None
        args = ledger.list_entries.call_args[0]
        assert args[2] == 2
        assert args[4] == "TOP_UP"

    async def test_string_cursor_ignored(self) -> None:
        ledger = AsyncMock()
        ledger.list_entries.return_value = []
        svc = WalletApplicationService(wallet_repo=AsyncMock(), ledger_repo=ledger)

        await svc.list_ledger(_db(), "u-1", cursor_encode("lib-1"), 20, None)

        assert ledger.list_entries.call_args[0][2] is None


class TestReconcile:
    async def test_consistent(self) -> None:
        wallet = AsyncMock()
        wallet.get_balance.return_value = 200
        ledger = AsyncMock()
        ledger.sum_for_user.return_value = 200
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=ledger)

        result = await svc.reconcile(_db(), "u-1")

        assert result.consistent is True
        assert result.ledger_total_cents == 200

    async def test_mismatch_reported(self) -> None:
        wallet = AsyncMock()
        wallet.get_balance.return_value = 1000
        ledger = AsyncMock()
        ledger.sum_for_user.return_value = 200
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=ledger)

        result = await svc.reconcile(_db(), "u-1")

        assert result.consistent is False
        assert result.balance_cents == 1000

    async def test_missing_account(self) -> None:
        wallet = AsyncMock()
        wallet.get_balance.return_value = None
        svc = WalletApplicationService(wallet_repo=wallet, ledger_repo=AsyncMock())

        with pytest.raises(AccountNotFoundError):
            await svc.reconcile(_db(), "ghost")
