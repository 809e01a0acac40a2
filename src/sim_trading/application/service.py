"""TradingService — the buy/sell ledger core.

A trade is one database transaction:

  buy:  stocks.available_quantity -= qty   (row lock, fresh price returned)
        users.balance             -= qty * price
        INSERT transactions (BUY)

  sell: stocks.available_quantity += qty   (row lock, fresh price returned)
        users.balance             += qty * price
        re-count holdings under the user lock
        INSERT transactions (SELL)

Preconditions are first checked against a snapshot so callers get the most
specific error; the conditional UPDATEs then re-check them under the row
locks. Any failure rolls back every statement of the trade.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sim_common.cents import cents_to_dollars, dollars_to_cents
from src.sim_common.database import transaction
from src.sim_common.enums import TradeType
from src.sim_common.errors import (
    InsufficientFundsError,
    InsufficientInventoryError,
    StockNotFoundError,
    TradingSuspendedError,
    UserNotFoundError,
)
from src.sim_risk.rules.balance_check import check_funds, check_trading_allowed
from src.sim_risk.rules.inventory import check_holdings, check_inventory
from src.sim_risk.rules.quantity import check_quantity
from src.sim_stock.domain.models import Stock, normalize_symbol
from src.sim_trading.application.schemas import BuyResponse, SellResponse
from src.sim_trading.domain.repository import TradingRepositoryProtocol
from src.sim_trading.infrastructure.persistence import TradingRepository
from src.sim_user.domain.models import User

logger = logging.getLogger("sim.trading")


class TradingService:
    def __init__(
        self,
        repo: TradingRepositoryProtocol | None = None,
        suspension_floor: int | None = None,
    ) -> None:
        self._repo: TradingRepositoryProtocol = repo or TradingRepository()
        self._floor = (
            suspension_floor if suspension_floor is not None
            else dollars_to_cents(settings.TRADING_SUSPENSION_FLOOR)
        )

    async def _load(self, db: AsyncSession, user_id: int, symbol: str) -> tuple[User, Stock]:
        user = await self._repo.get_user(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        stock = await self._repo.get_stock(db, symbol)
        if stock is None:
            raise StockNotFoundError(symbol)
        check_trading_allowed(user.balance, self._floor)
        return user, stock

    async def buy(
        self, db: AsyncSession, user_id: int, symbol: str, quantity: int
    ) -> BuyResponse:
        check_quantity(quantity)
        symbol = normalize_symbol(symbol)

        async with transaction(db, f"buy {quantity} {symbol} for user {user_id}"):
            user, stock = await self._load(db, user_id, symbol)
            check_funds(quantity * stock.current_price, user.balance)
            check_inventory(quantity, stock.available_quantity)

            locked = await self._repo.take_inventory(db, stock.id, quantity)
            if locked is None:
                raise InsufficientInventoryError(quantity, stock.available_quantity)

            cost = quantity * locked.current_price
            new_balance = await self._repo.debit_balance(db, user.id, cost, self._floor)
            if new_balance is None:
                current = await self._repo.get_user(db, user.id)
                balance = current.balance if current else user.balance
                if balance < self._floor:
                    raise TradingSuspendedError(balance, self._floor)
                raise InsufficientFundsError(cost, balance)

            txn = await self._repo.insert_transaction(
                db, user.id, stock.id, TradeType.BUY.value,
                quantity, locked.current_price, cost,
            )

        logger.info(
            "BUY user=%d %s x%d @ %d cents, balance now %d cents",
            user.id, symbol, quantity, locked.current_price, new_balance,
        )
        return BuyResponse(
            transaction_id=txn.id,
            symbol=symbol,
            quantity=quantity,
            price_per_share=cents_to_dollars(locked.current_price),
            total_cost=cents_to_dollars(cost),
            new_balance=cents_to_dollars(new_balance),
        )

    async def sell(
        self, db: AsyncSession, user_id: int, symbol: str, quantity: int
    ) -> SellResponse:
        check_quantity(quantity)
        symbol = normalize_symbol(symbol)

        async with transaction(db, f"sell {quantity} {symbol} for user {user_id}"):
            user, stock = await self._load(db, user_id, symbol)
            check_holdings(quantity, await self._repo.held_quantity(db, user.id, stock.id))

            locked = await self._repo.return_inventory(db, stock.id, quantity)
            if locked is None:
                raise StockNotFoundError(symbol)

            revenue = quantity * locked.current_price
            new_balance = await self._repo.credit_balance(db, user.id, revenue, self._floor)
            if new_balance is None:
                current = await self._repo.get_user(db, user.id)
                raise TradingSuspendedError(
                    current.balance if current else user.balance, self._floor
                )

            # The user row is locked now; a concurrent sell has either committed or waits
            check_holdings(quantity, await self._repo.held_quantity(db, user.id, stock.id))

            txn = await self._repo.insert_transaction(
                db, user.id, stock.id, TradeType.SELL.value,
                quantity, locked.current_price, revenue,
            )

        logger.info(
            "SELL user=%d %s x%d @ %d cents, balance now %d cents",
            user.id, symbol, quantity, locked.current_price, new_balance,
        )
        return SellResponse(
            transaction_id=txn.id,
            symbol=symbol,
            quantity=quantity,
            price_per_share=cents_to_dollars(locked.current_price),
            total_revenue=cents_to_dollars(revenue),
            new_balance=cents_to_dollars(new_balance),
        )
