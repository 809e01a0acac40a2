"""Domain models for sim_trading — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Transaction:
    """One immutable ledger line. Append-only; never updated."""

    id: int
    user_id: int
    stock_id: int
    type: str                   # TradeType value
    quantity: int               # > 0
    price_per_share: int        # cents, price snapshot under the stock row lock
    total_amount: int           # cents, quantity * price_per_share
    created_at: datetime | str | None = None


@dataclass
class LockedStock:
    """Stock state returned by the inventory UPDATE that locked the row."""

    stock_id: int
    current_price: int          # cents
    available_quantity: int
