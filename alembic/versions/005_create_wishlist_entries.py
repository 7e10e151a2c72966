"""005: create wishlist_entries table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE wishlist_entries (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            game_id         VARCHAR(64)     NOT NULL REFERENCES games (id),
            added_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_wishlist_user_game UNIQUE (user_id, game_id)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wishlist_entries CASCADE;")
