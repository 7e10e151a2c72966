"""Concurrency properties of PurchaseEngine against an in-memory store.

The fakes model the two database guarantees the engine relies on: the wallet
row lock (held from load_for_update until commit/rollback) and the library
unique constraint (a concurrent insert of the same pair waits for the first
transaction to finish, then gets no row back if it committed). Writes are
staged per session and only become visible on commit.
"""

import asyncio
from collections import defaultdict
from collections.abc import Callable
from datetime import UTC, datetime

from src.gs_account.domain.models import LedgerEntry, WalletAccount
from src.gs_catalog.domain.models import Game
from src.gs_common.background import DetachedTaskRunner
from src.gs_common.enums import LedgerEntryType, PurchaseErrorKind
from src.gs_common.errors import InternalError
from src.gs_library.domain.models import LibraryEntry
from src.gs_purchase.application.engine import PurchaseEngine
from src.gs_purchase.domain.badges import NoopBadgeEvaluator


class FakeStore:
    def __init__(self) -> None:
        self.games: dict[str, Game] = {}
        self.wallets: dict[str, WalletAccount] = {}
        self.library: dict[tuple[str, str], LibraryEntry] = {}
        self.wishlist: set[tuple[str, str]] = set()
        self.ledger: list[LedgerEntry] = []
        self.row_locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.pending_library: set[tuple[str, str]] = set()
        self._next_ledger_id = 1

    def next_ledger_id(self) -> int:
        entry_id = self._next_ledger_id
        self._next_ledger_id += 1
        return entry_id


class FakeSession:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.staged: list[Callable[[], None]] = []
        self.locks: list[asyncio.Lock] = []
        self.reserved: list[tuple[str, str]] = []

    async def commit(self) -> None:
        await asyncio.sleep(0)
        for apply in self.staged:
            apply()
        self._end()

    async def rollback(self) -> None:
        self._end()

    def _end(self) -> None:
        for key in self.reserved:
            self.store.pending_library.discard(key)
        for lock in self.locks:
            lock.release()
        self.staged.clear()
        self.locks.clear()
        self.reserved.clear()


class FakeCatalog:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_game_by_id(self, db, game_id):
        await asyncio.sleep(0)
        return self.store.games.get(game_id)


class FakeWallet:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_balance(self, db, user_id):
        account = self.store.wallets.get(user_id)
        return account.balance if account else None

    async def load_for_update(self, db, user_id):
        lock = self.store.row_locks[user_id]
        await lock.acquire()
        db.locks.append(lock)
        return self.store.wallets.get(user_id)

    async def set_balance(self, db, account, new_balance):
        await asyncio.sleep(0)
        current = self.store.wallets[account.user_id]
        if current.version != account.version or new_balance < 0:
            raise InternalError("wallet changed since load")
        updated = WalletAccount(account.user_id, new_balance, account.version + 1)
        db.staged.append(lambda: self.store.wallets.__setitem__(account.user_id, updated))
        return updated


class FakeOwnership:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def exists(self, db, user_id, game_id):
        await asyncio.sleep(0)
        return (user_id, game_id) in self.store.library

    async def insert(self, db, entry):
        key = (entry.user_id, entry.game_id)
        while key in self.store.pending_library:
            await asyncio.sleep(0)
        if key in self.store.library:
            return None
        self.store.pending_library.add(key)
        db.reserved.append(key)
        db.staged.append(lambda: self.store.library.__setitem__(key, entry))
        return entry

    async def list_for_user(self, db, user_id, cursor, limit):
        return [e for (u, _), e in self.store.library.items() if u == user_id][:limit]


class FakeWishlist:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def exists(self, db, user_id, game_id):
        return (user_id, game_id) in self.store.wishlist

    async def delete(self, db, user_id, game_id):
        key = (user_id, game_id)
        if key not in self.store.wishlist:
            return False
        db.staged.append(lambda: self.store.wishlist.discard(key))
        return True


class FakeLedger:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def append(self, db, user_id, entry_type, amount, balance_after, game_id, description):
        entry = LedgerEntry(
            id=self.store.next_ledger_id(),
            user_id=user_id,
            entry_type=entry_type,
            amount=amount,
            balance_after=balance_after,
            game_id=game_id,
            description=description,
            created_at=datetime.now(UTC),
        )
        db.staged.append(lambda: self.store.ledger.append(entry))
        return entry

    async def list_entries(self, db, user_id, cursor_id, limit, entry_type):
        return [e for e in self.store.ledger if e.user_id == user_id][:limit]

    async def sum_for_user(self, db, user_id):
        return sum(e.amount for e in self.store.ledger if e.user_id == user_id)


def _engine(store: FakeStore) -> PurchaseEngine:
    return PurchaseEngine(
        catalog_repo=FakeCatalog(store),
        wallet_repo=FakeWallet(store),
        ledger_repo=FakeLedger(store),
        library_repo=FakeOwnership(store),
        wishlist_repo=FakeWishlist(store),
        badges=NoopBadgeEvaluator(),
        tasks=DetachedTaskRunner(),
        timeout_seconds=5.0,
    )


def _store(balance: int, *games: Game) -> FakeStore:
    store = FakeStore()
    store.wallets["u-1"] = WalletAccount(user_id="u-1", balance=balance, version=0)
    for game in games:
        store.games[game.id] = game
    return store


class TestConcurrentDoublePurchase:
    async def test_exactly_one_wins(self) -> None:
        store = _store(2000, Game(id="g-1", name="Hollow Knight", price=800, sale_price=0))
        engine = _engine(store)

        outcomes = await asyncio.gather(
            engine.purchase(FakeSession(store), "u-1", "g-1"),
            engine.purchase(FakeSession(store), "u-1", "g-1"),
        )

        assert sum(o.ok for o in outcomes) == 1
        loser = next(o for o in outcomes if not o.ok)
        assert loser.error.kind is PurchaseErrorKind.ALREADY_OWNED
        assert store.wallets["u-1"].balance == 1200
        assert list(store.library) == [("u-1", "g-1")]
        assert len(store.ledger) == 1

    async def test_exactly_one_wins_for_free_game(self) -> None:
        store = _store(0, Game(id="g-free", name="Free Weekend", price=0, sale_price=0))
        engine = _engine(store)

        outcomes = await asyncio.gather(
            *(engine.purchase(FakeSession(store), "u-1", "g-free") for _ in range(3))
        )

        assert sum(o.ok for o in outcomes) == 1
        assert {o.error.kind for o in outcomes if not o.ok} == {PurchaseErrorKind.ALREADY_OWNED}
        assert len(store.library) == 1
        assert store.ledger == []


class TestBalanceNeverNegative:
    async def test_concurrent_purchases_of_different_games(self) -> None:
        games = [Game(id=f"g-{i}", name=f"Game {i}", price=300, sale_price=0) for i in range(5)]
        store = _store(1000, *games)
        engine = _engine(store)

        outcomes = await asyncio.gather(
            *(engine.purchase(FakeSession(store), "u-1", g.id) for g in games)
        )

        assert sum(o.ok for o in outcomes) == 3
        failures = [o.error.kind for o in outcomes if not o.ok]
        assert failures == [PurchaseErrorKind.INSUFFICIENT_FUNDS] * 2
        assert store.wallets["u-1"].balance == 100
        assert len(store.library) == 3
        # every debit is recorded and the snapshots chain correctly
        assert sum(e.amount for e in store.ledger) == 100 - 1000
        assert sorted(e.balance_after for e in store.ledger) == [100, 400, 700]
        assert all(e.entry_type == LedgerEntryType.PURCHASE.value for e in store.ledger)


class TestWishlistCleanup:
    async def test_purchase_removes_wishlist_entry_once(self) -> None:
        store = _store(1000, Game(id="g-1", name="Hollow Knight", price=800, sale_price=0))
        store.wishlist.add(("u-1", "g-1"))
        engine = _engine(store)

        first = await engine.purchase(FakeSession(store), "u-1", "g-1")
        second = await engine.purchase(FakeSession(store), "u-1", "g-1")

        assert first.receipt.wishlist_removed is True
        assert store.wishlist == set()
        assert second.error.kind is PurchaseErrorKind.ALREADY_OWNED

    async def test_failed_purchase_keeps_wishlist_entry(self) -> None:
        store = _store(100, Game(id="g-1", name="Hollow Knight", price=800, sale_price=0))
        store.wishlist.add(("u-1", "g-1"))

        outcome = await _engine(store).purchase(FakeSession(store), "u-1", "g-1")

        assert outcome.error.kind is PurchaseErrorKind.INSUFFICIENT_FUNDS
        assert store.wishlist == {("u-1", "g-1")}
        assert store.library == {}
        assert store.wallets["u-1"].balance == 100
