"""Read-model rows for sim_report. All money fields are int cents."""

from dataclasses import dataclass


@dataclass
class PositionRow:
    stock_id: int
    symbol: str
    name: str
    current_price: int
    quantity_owned: int
    total_buy_cost: int
    total_sell_revenue: int

    @property
    def market_value(self) -> int:
        return self.quantity_owned * self.current_price

    @property
    def profit_loss(self) -> int:
        return self.market_value - self.total_buy_cost + self.total_sell_revenue


@dataclass
class TradeTotals:
    total_buy_cost: int = 0
    total_sell_revenue: int = 0

    @property
    def net_profit_loss(self) -> int:
        return self.total_sell_revenue - self.total_buy_cost


@dataclass
class StockStatsRow:
    id: int
    symbol: str
    name: str
    current_price: int
    initial_price: int
    total_volume_traded: int
    total_value_traded: int


@dataclass
class UserRankRow:
    id: int
    username: str
    balance: int
    loan_amount: int
    net_profit_loss: int


@dataclass
class StockRankRow:
    id: int
    symbol: str
    name: str
    current_price: int
    total_traded_value: int
