"""Domain models for sim_stock — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Stock:
    id: int
    symbol: str                 # always upper-case
    name: str
    current_price: int          # cents, within [100, 10000]
    initial_price: int          # cents, fixed at registration
    available_quantity: int     # shares still on offer, >= 0
    created_at: datetime | str | None = None
    updated_at: datetime | str | None = None


@dataclass
class PricePoint:
    id: int
    stock_id: int
    price: int                  # cents
    recorded_at: datetime | str | None = None
    symbol: str | None = None
    name: str | None = None


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()
