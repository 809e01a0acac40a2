"""SQLAlchemy ORM model for the users table.

Alembic migration 001_create_users.py carries the same DDL for PostgreSQL.
"""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.sim_common.database import Base


class UserORM(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("loan_amount >= 0", name="ck_users_loan_gte_0"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    loan_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
