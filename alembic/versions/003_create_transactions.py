"""003: create transactions table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             BIGINT          NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            stock_id            BIGINT          NOT NULL REFERENCES stocks (id) ON DELETE CASCADE,
            type                VARCHAR(4)      NOT NULL,
            quantity            BIGINT          NOT NULL,
            price_per_share     BIGINT          NOT NULL,
            total_amount        BIGINT          NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type         CHECK (type IN ('BUY', 'SELL')),
            CONSTRAINT ck_transactions_quantity     CHECK (quantity > 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_user_stock ON transactions (user_id, stock_id);")
    op.execute("CREATE INDEX idx_transactions_stock ON transactions (stock_id);")
    op.execute("COMMENT ON TABLE transactions IS 'Append-only trade log; holdings are derived from it';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
