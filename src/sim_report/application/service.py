"""ReportService — portfolio, stock performance and leaderboards.

Read-only; runs without an explicit transaction. Aggregation happens in
cents and is converted to dollars only when building the response.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.cents import cents_to_dollars
from src.sim_common.errors import UserNotFoundError
from src.sim_report.application.schemas import (
    PortfolioItem,
    StockReportItem,
    TopStockItem,
    TopUserItem,
    UserReportResponse,
)
from src.sim_report.infrastructure.persistence import ReportRepository
from src.sim_stock.domain.models import normalize_symbol
from src.sim_user.infrastructure.persistence import UserRepository


def percentage_change(current: int, initial: int) -> float:
    if initial == 0:
        return 0.0
    return round((current - initial) / initial * 100, 2)


class ReportService:
    def __init__(
        self,
        repo: ReportRepository | None = None,
        users: UserRepository | None = None,
    ) -> None:
        self._repo = repo or ReportRepository()
        self._users = users or UserRepository()

    async def user_report(self, db: AsyncSession, user_id: int) -> UserReportResponse:
        user = await self._users.get_user_by_id(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        positions = await self._repo.positions(db, user_id)
        totals = await self._repo.trade_totals(db, user_id)

        portfolio = [
            PortfolioItem(
                symbol=p.symbol,
                name=p.name,
                quantity_owned=p.quantity_owned,
                current_price=cents_to_dollars(p.current_price),
                market_value=cents_to_dollars(p.market_value),
                profit_loss=cents_to_dollars(p.profit_loss),
            )
            for p in positions
        ]
        return UserReportResponse(
            user_id=user.id,
            username=user.username,
            current_balance=cents_to_dollars(user.balance),
            loan_amount=cents_to_dollars(user.loan_amount),
            portfolio=portfolio,
            total_portfolio_value=cents_to_dollars(sum(p.market_value for p in positions)),
            total_profit_loss=cents_to_dollars(totals.net_profit_loss),
        )

    async def stock_report(
        self, db: AsyncSession, symbol: str | None = None
    ) -> list[StockReportItem]:
        lookup = normalize_symbol(symbol) if symbol else None
        rows = await self._repo.stock_stats(db, lookup)
        return [
            StockReportItem(
                id=r.id,
                symbol=r.symbol,
                name=r.name,
                current_price=cents_to_dollars(r.current_price),
                initial_price=cents_to_dollars(r.initial_price),
                price_change=cents_to_dollars(r.current_price - r.initial_price),
                percentage_change=percentage_change(r.current_price, r.initial_price),
                total_volume_traded=r.total_volume_traded,
                total_value_traded=cents_to_dollars(r.total_value_traded),
            )
            for r in rows
        ]

    async def top_users(self, db: AsyncSession) -> list[TopUserItem]:
        rows = await self._repo.top_users(db)
        return [
            TopUserItem(
                id=r.id,
                username=r.username,
                current_balance=cents_to_dollars(r.balance),
                loan_amount=cents_to_dollars(r.loan_amount),
                net_profit_loss=cents_to_dollars(r.net_profit_loss),
            )
            for r in rows
        ]

    async def top_stocks(self, db: AsyncSession) -> list[TopStockItem]:
        rows = await self._repo.top_stocks(db)
        return [
            TopStockItem(
                id=r.id,
                symbol=r.symbol,
                name=r.name,
                current_price=cents_to_dollars(r.current_price),
                total_traded_value=cents_to_dollars(r.total_traded_value),
            )
            for r in rows
        ]
