"""Integer money helpers.

All prices, amounts and balances are int cents. No float, no Decimal.
"""

from config.settings import settings


def validate_amount(amount: int) -> None:
    """Reject zero and negative amounts for credits and debits."""
    if amount <= 0:
        raise ValueError(f"Amount must be a positive number of cents, got {amount}")


def cents_to_display(cents: int, currency: str | None = None) -> str:
    """Render cents for humans: 120050 -> '1,200.50 UAH', -800 -> '-8.00 UAH'."""
    code = currency or settings.CURRENCY
    sign = "-" if cents < 0 else ""
    abs_cents = abs(cents)
    return f"{sign}{abs_cents // 100:,}.{abs_cents % 100:02d} {code}"
