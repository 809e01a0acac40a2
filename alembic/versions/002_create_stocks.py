"""002: create stocks table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE stocks (
            id                  BIGSERIAL       PRIMARY KEY,
            symbol              VARCHAR(16)     NOT NULL,
            name                VARCHAR(255)    NOT NULL,
            current_price       BIGINT          NOT NULL,
            initial_price       BIGINT          NOT NULL,
            available_quantity  BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_stocks_symbol             UNIQUE (symbol),
            CONSTRAINT ck_stocks_price_range        CHECK (current_price BETWEEN 100 AND 10000),
            CONSTRAINT ck_stocks_available_gte_0    CHECK (available_quantity >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_stocks_updated_at
            BEFORE UPDATE ON stocks
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE stocks IS 'Tradable stocks: price in cents, shares on offer';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stocks CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
