"""ReportRepository — read-only aggregations over the transaction log.

Aggregates are COALESCEd so stocks/users with no trades read as 0.
HAVING repeats the aggregate expression instead of the column alias
(PostgreSQL does not resolve output aliases there).
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_report.domain.models import (
    PositionRow,
    StockRankRow,
    StockStatsRow,
    TradeTotals,
    UserRankRow,
)

TOP_N = 10

_NET_QUANTITY = "SUM(CASE WHEN t.type = 'BUY' THEN t.quantity ELSE -t.quantity END)"

_POSITIONS_SQL = text(f"""
    SELECT
        s.id AS stock_id,
        s.symbol,
        s.name,
        s.current_price,
        {_NET_QUANTITY} AS quantity_owned,
        COALESCE(SUM(CASE WHEN t.type = 'BUY' THEN t.total_amount ELSE 0 END), 0) AS total_buy_cost,
        COALESCE(SUM(CASE WHEN t.type = 'SELL' THEN t.total_amount ELSE 0 END), 0) AS total_sell_revenue
    FROM transactions t
    JOIN stocks s ON s.id = t.stock_id
    WHERE t.user_id = :user_id
    GROUP BY s.id, s.symbol, s.name, s.current_price
    HAVING {_NET_QUANTITY} > 0
    ORDER BY s.symbol ASC
""")

_TRADE_TOTALS_SQL = text("""
    SELECT
        COALESCE(SUM(CASE WHEN type = 'BUY' THEN total_amount ELSE 0 END), 0) AS total_buy_cost,
        COALESCE(SUM(CASE WHEN type = 'SELL' THEN total_amount ELSE 0 END), 0) AS total_sell_revenue
    FROM transactions
    WHERE user_id = :user_id
""")

_STOCK_STATS_SQL = text("""
    SELECT
        s.id,
        s.symbol,
        s.name,
        s.current_price,
        s.initial_price,
        COALESCE(SUM(t.quantity), 0) AS total_volume_traded,
        COALESCE(SUM(t.total_amount), 0) AS total_value_traded
    FROM stocks s
    LEFT JOIN transactions t ON t.stock_id = s.id
    WHERE CAST(:symbol AS TEXT) IS NULL OR s.symbol = CAST(:symbol AS TEXT)
    GROUP BY s.id, s.symbol, s.name, s.current_price, s.initial_price
    ORDER BY s.symbol ASC
""")

_TOP_USERS_SQL = text("""
    SELECT
        u.id,
        u.username,
        u.balance,
        u.loan_amount,
        COALESCE(SUM(CASE WHEN t.type = 'SELL' THEN t.total_amount
                          WHEN t.type = 'BUY' THEN -t.total_amount
                          ELSE 0 END), 0) AS net_profit_loss
    FROM users u
    LEFT JOIN transactions t ON t.user_id = u.id
    GROUP BY u.id, u.username, u.balance, u.loan_amount
    ORDER BY net_profit_loss DESC, u.id ASC
    LIMIT :limit
""")

_TOP_STOCKS_SQL = text("""
    SELECT
        s.id,
        s.symbol,
        s.name,
        s.current_price,
        SUM(t.total_amount) AS total_traded_value
    FROM stocks s
    JOIN transactions t ON t.stock_id = s.id
    GROUP BY s.id, s.symbol, s.name, s.current_price
    ORDER BY total_traded_value DESC, s.id ASC
    LIMIT :limit
""")


class ReportRepository:
    async def positions(self, db: AsyncSession, user_id: int) -> list[PositionRow]:
        rows = (await db.execute(_POSITIONS_SQL, {"user_id": user_id})).fetchall()
        return [
            PositionRow(
                stock_id=r.stock_id,
                symbol=r.symbol,
                name=r.name,
                current_price=int(r.current_price),
                quantity_owned=int(r.quantity_owned),
                total_buy_cost=int(r.total_buy_cost),
                total_sell_revenue=int(r.total_sell_revenue),
            )
            for r in rows
        ]

    async def trade_totals(self, db: AsyncSession, user_id: int) -> TradeTotals:
        row = (await db.execute(_TRADE_TOTALS_SQL, {"user_id": user_id})).fetchone()
        if row is None:
            return TradeTotals()
        return TradeTotals(
            total_buy_cost=int(row.total_buy_cost),
            total_sell_revenue=int(row.total_sell_revenue),
        )

    async def stock_stats(self, db: AsyncSession, symbol: str | None) -> list[StockStatsRow]:
        rows = (await db.execute(_STOCK_STATS_SQL, {"symbol": symbol})).fetchall()
        return [
            StockStatsRow(
                id=r.id,
                symbol=r.symbol,
                name=r.name,
                current_price=int(r.current_price),
                initial_price=int(r.initial_price),
                total_volume_traded=int(r.total_volume_traded),
                total_value_traded=int(r.total_value_traded),
            )
            for r in rows
        ]

    async def top_users(self, db: AsyncSession, limit: int = TOP_N) -> list[UserRankRow]:
        rows = (await db.execute(_TOP_USERS_SQL, {"limit": limit})).fetchall()
        return [
            UserRankRow(
                id=r.id,
                username=r.username,
                balance=int(r.balance),
                loan_amount=int(r.loan_amount),
                net_profit_loss=int(r.net_profit_loss),
            )
            for r in rows
        ]

    async def top_stocks(self, db: AsyncSession, limit: int = TOP_N) -> list[StockRankRow]:
        rows = (await db.execute(_TOP_STOCKS_SQL, {"limit": limit})).fetchall()
        return [
            StockRankRow(
                id=r.id,
                symbol=r.symbol,
                name=r.name,
                current_price=int(r.current_price),
                total_traded_value=int(r.total_traded_value or 0),
            )
            for r in rows
        ]
