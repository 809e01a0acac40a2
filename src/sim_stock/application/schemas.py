"""Pydantic schemas for sim_stock API. Money crosses the wire in dollars."""

from pydantic import Field

from src.sim_common.cents import MAX_SHARES, cents_to_dollars
from src.sim_common.datetime_utils import to_iso
from src.sim_common.response import CamelModel, NonBlankStr
from src.sim_stock.domain.models import PricePoint, Stock

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RegisterStockRequest(CamelModel):
    symbol: NonBlankStr = Field(..., min_length=1, max_length=16)
    name: NonBlankStr = Field(..., min_length=1, max_length=255)
    initial_price: float = Field(
        ..., allow_inf_nan=False, description="Initial price in dollars, 1 to 100"
    )
    available_quantity: int = Field(..., ge=0, le=MAX_SHARES, description="Shares on offer")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class StockResponse(CamelModel):
    id: int
    symbol: str
    name: str
    current_price: float
    initial_price: float
    available_quantity: int

    @classmethod
    def from_domain(cls, stock: Stock) -> "StockResponse":
        return cls(
            id=stock.id,
            symbol=stock.symbol,
            name=stock.name,
            current_price=cents_to_dollars(stock.current_price),
            initial_price=cents_to_dollars(stock.initial_price),
            available_quantity=stock.available_quantity,
        )


class PriceHistoryItem(CamelModel):
    id: int
    stock_id: int
    symbol: str | None
    name: str | None
    price: float
    timestamp: str | None

    @classmethod
    def from_domain(cls, point: PricePoint) -> "PriceHistoryItem":
        return cls(
            id=point.id,
            stock_id=point.stock_id,
            symbol=point.symbol,
            name=point.name,
            price=cents_to_dollars(point.price),
            timestamp=to_iso(point.recorded_at),
        )
