"""Domain models for gs_catalog — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Game:
    id: str
    name: str
    price: int          # cents, list price
    sale_price: int     # cents, 0 = no discount
    is_dlc: bool = False
    base_game_id: str | None = None

    @property
    def effective_price(self) -> int:
        """Price actually charged: the sale price when positive, else the list price."""
        return self.sale_price if self.sale_price > 0 else self.price

    @property
    def is_free(self) -> bool:
        return self.effective_price == 0
