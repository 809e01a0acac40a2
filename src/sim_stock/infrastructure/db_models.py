"""SQLAlchemy ORM models for the stocks and stock_price_history tables.

persistence.py uses raw text() SQL; these mappings drive create_all for the
SQLite dev/test database. Alembic migrations 002/004 carry the same DDL for
PostgreSQL. DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.sim_common.database import Base


class StockORM(Base):
    __tablename__ = "stocks"
    __table_args__ = (
        CheckConstraint(
            "current_price BETWEEN 100 AND 10000", name="ck_stocks_current_price_range"
        ),
        CheckConstraint("available_quantity >= 0", name="ck_stocks_available_gte_0"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    current_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    initial_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class PriceHistoryORM(Base):
    __tablename__ = "stock_price_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    stock_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stocks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # NOTE: No updated_at, stock_price_history is append-only
