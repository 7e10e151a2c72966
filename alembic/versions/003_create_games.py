"""003: create games table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE games (
            id              VARCHAR(64)     PRIMARY KEY,
            name            VARCHAR(200)    NOT NULL,
            price           BIGINT          NOT NULL,
            sale_price      BIGINT          NOT NULL DEFAULT 0,
            is_dlc          BOOLEAN         NOT NULL DEFAULT FALSE,
            base_game_id    VARCHAR(64)     REFERENCES games (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_games_price_gte_0 CHECK (price >= 0),
            CONSTRAINT ck_games_sale_price_gte_0 CHECK (sale_price >= 0),
            CONSTRAINT ck_games_base_only_for_dlc CHECK (base_game_id IS NULL OR is_dlc),
            CONSTRAINT ck_games_base_not_self CHECK (base_game_id IS NULL OR base_game_id <> id)
        );
    """)
    # A DLC's base must itself be a base game
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_games_base_not_dlc()
        RETURNS TRIGGER AS $$
        BEGIN
            IF NEW.base_game_id IS NOT NULL AND EXISTS (
                SELECT 1 FROM games WHERE id = NEW.base_game_id AND is_dlc
            ) THEN
                RAISE EXCEPTION 'base game % of % is itself a DLC', NEW.base_game_id, NEW.id;
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER trg_games_base_not_dlc
            BEFORE INSERT OR UPDATE OF base_game_id, is_dlc ON games
            FOR EACH ROW EXECUTE FUNCTION fn_games_base_not_dlc();
    """)
    op.execute("CREATE INDEX idx_games_base ON games (base_game_id) WHERE base_game_id IS NOT NULL;")
    op.execute("COMMENT ON TABLE games IS 'Catalog; read-only for the purchase path. Prices in cents, sale_price 0 = no discount';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS games CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_games_base_not_dlc();")
