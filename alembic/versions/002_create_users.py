"""002: create users table (wallet balance lives here)

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              VARCHAR(64)     PRIMARY KEY,
            nickname        VARCHAR(64),
            balance         BIGINT          NOT NULL DEFAULT 0,
            version         BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_users_balance_gte_0 CHECK (balance >= 0),
            CONSTRAINT ck_users_version_gte_0 CHECK (version >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE users IS 'Store users; balance is the wallet, in cents';")
    op.execute("COMMENT ON COLUMN users.version IS 'Bumped on every balance write; guards set_balance';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
