"""Pydantic schemas for the gs_purchase API."""

from pydantic import BaseModel, Field

from src.gs_common.cents import cents_to_display
from src.gs_purchase.domain.models import PurchaseReceipt


class PurchaseRequest(BaseModel):
    game_id: str = Field(..., min_length=1, max_length=64)


class PurchaseResponse(BaseModel):
    library_entry_id: str
    game_id: str
    price_paid_cents: int
    price_paid_display: str
    balance_cents: int
    balance_display: str
    ledger_entry_id: int | None
    wishlist_removed: bool

    @classmethod
    def from_receipt(cls, receipt: PurchaseReceipt) -> "PurchaseResponse":
        return cls(
            library_entry_id=receipt.library_entry_id,
            game_id=receipt.game_id,
            price_paid_cents=receipt.price_paid,
            price_paid_display=cents_to_display(receipt.price_paid),
            balance_cents=receipt.new_balance,
            balance_display=cents_to_display(receipt.new_balance),
            ledger_entry_id=receipt.ledger_entry_id,
            wishlist_removed=receipt.wishlist_removed,
        )
