"""004: create library_entries table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE library_entries (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            game_id         VARCHAR(64)     NOT NULL REFERENCES games (id),
            acquired_at     TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_library_user_game UNIQUE (user_id, game_id)
        );
    """)
    op.execute("CREATE INDEX idx_library_user_time ON library_entries (user_id, acquired_at DESC, id DESC);")
    op.execute("COMMENT ON TABLE library_entries IS 'Ownership records; uq_library_user_game decides concurrent purchases';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS library_entries CASCADE;")
