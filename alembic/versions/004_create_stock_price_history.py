"""004: create stock_price_history table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE stock_price_history (
            id              BIGSERIAL       PRIMARY KEY,
            stock_id        BIGINT          NOT NULL REFERENCES stocks (id) ON DELETE CASCADE,
            price           BIGINT          NOT NULL,
            recorded_at     TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute(
        "CREATE INDEX idx_price_history_stock_time ON stock_price_history (stock_id, recorded_at);"
    )
    op.execute("COMMENT ON TABLE stock_price_history IS 'One row per registration and price tick';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stock_price_history CASCADE;")
