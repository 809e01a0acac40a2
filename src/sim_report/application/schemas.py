"""Pydantic schemas for sim_report API. Money crosses the wire in dollars."""

from src.sim_common.response import CamelModel


class PortfolioItem(CamelModel):
    symbol: str
    name: str
    quantity_owned: int
    current_price: float
    market_value: float
    profit_loss: float


class UserReportResponse(CamelModel):
    user_id: int
    username: str
    current_balance: float
    loan_amount: float
    portfolio: list[PortfolioItem]
    total_portfolio_value: float
    total_profit_loss: float


class StockReportItem(CamelModel):
    id: int
    symbol: str
    name: str
    current_price: float
    initial_price: float
    price_change: float
    percentage_change: float
    total_volume_traded: int
    total_value_traded: float


class TopUserItem(CamelModel):
    id: int
    username: str
    current_balance: float
    loan_amount: float
    net_profit_loss: float


class TopStockItem(CamelModel):
    id: int
    symbol: str
    name: str
    current_price: float
    total_traded_value: float
