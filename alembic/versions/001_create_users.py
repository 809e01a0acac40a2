"""001: create users table

Revision ID: 001
Revises: 
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              BIGSERIAL       PRIMARY KEY,
            username        VARCHAR(64)     NOT NULL,
            password_hash   VARCHAR(255)    NOT NULL,
            balance         BIGINT          NOT NULL DEFAULT 0,
            loan_amount     BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_username        UNIQUE (username),
            CONSTRAINT ck_users_loan_gte_0      CHECK (loan_amount >= 0)
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'Traders: cash balance and outstanding loan, in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
