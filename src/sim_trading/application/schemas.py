"""Pydantic schemas for sim_trading API. Money crosses the wire in dollars."""

from pydantic import Field

from src.sim_common.cents import MAX_SHARES
from src.sim_common.response import CamelModel


class TradeRequest(CamelModel):
    user_id: int
    stock_symbol: str = Field(..., min_length=1, max_length=16)
    # Positivity is a trading rule (InvalidQuantityError), not a schema rule
    quantity: int = Field(..., le=MAX_SHARES)


class BuyResponse(CamelModel):
    transaction_id: int
    symbol: str
    quantity: int
    price_per_share: float
    total_cost: float
    new_balance: float


class SellResponse(CamelModel):
    transaction_id: int
    symbol: str
    quantity: int
    price_per_share: float
    total_revenue: float
    new_balance: float
