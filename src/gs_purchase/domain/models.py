"""Purchase domain models — pure dataclasses, no external dependencies."""

from dataclasses import dataclass

from src.gs_common.errors import PurchaseError


@dataclass(frozen=True)
class PurchaseReceipt:
    library_entry_id: str
    game_id: str
    price_paid: int  # cents; 0 for a free game
    new_balance: int  # cents, after the purchase
    ledger_entry_id: int | None  # None for a free game
    wishlist_removed: bool


@dataclass(frozen=True)
class PurchaseOutcome:
    """Exactly one of receipt / error is set."""

    receipt: PurchaseReceipt | None = None
    error: PurchaseError | None = None

    @classmethod
    def succeeded(cls, receipt: PurchaseReceipt) -> "PurchaseOutcome":
        return cls(receipt=receipt)

    @classmethod
    def failed(cls, error: PurchaseError) -> "PurchaseOutcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
