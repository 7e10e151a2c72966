"""SQLAlchemy ORM model for the games table.

Alembic migration 003_create_games.py is the authoritative DDL source.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.gs_common.database import Base


class GameORM(Base):
    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    sale_price: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    is_dlc: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    base_game_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("games.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
