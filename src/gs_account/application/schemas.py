"""Pydantic schemas for the gs_account (wallet) API."""

from pydantic import BaseModel, Field

from src.gs_common.cents import cents_to_display
from src.gs_common.enums import LedgerEntryType

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TopUpRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to add to the wallet in cents")
    description: str | None = Field(None, max_length=200)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    balance_cents: int
    balance_display: str

    @classmethod
    def from_cents(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            balance_cents=balance,
            balance_display=cents_to_display(balance),
        )


class TopUpResponse(BaseModel):
    balance_cents: int
    balance_display: str
    credited_cents: int
    credited_display: str
    ledger_entry_id: int

    @classmethod
    def from_result(cls, balance: int, amount: int, entry_id: int) -> "TopUpResponse":
        return cls(
            balance_cents=balance,
            balance_display=cents_to_display(balance),
            credited_cents=amount,
            credited_display=cents_to_display(amount),
            ledger_entry_id=entry_id,
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: LedgerEntryType
    game_id: str | None
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    description: str | None
    created_at: str  # ISO8601 string


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool


class ReconciliationResponse(BaseModel):
    user_id: str
    balance_cents: int
    ledger_total_cents: int
    consistent: bool
