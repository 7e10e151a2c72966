"""Domain models for gs_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class WalletAccount:
    """A user's balance as loaded inside a transaction.

    `version` is the value seen at load time; writes are guarded by it.
    """

    user_id: str
    balance: int     # cents, never negative once committed
    version: int


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # cents, positive=credit negative=debit
    balance_after: int               # cents, balance snapshot after the movement
    game_id: str | None = None       # None for top-ups
    description: str | None = None
    created_at: datetime | None = None
