"""StockApplicationService — stock registration and price history.

register_stock writes the stock row and its first price-history row in one
transaction. price_history is read-only and runs without explicit transaction.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.cents import dollars_to_cents
from src.sim_common.database import transaction
from src.sim_common.errors import InvalidRequestError, StockExistsError
from src.sim_risk.rules.price_range import check_price_range
from src.sim_stock.application.schemas import PriceHistoryItem, StockResponse
from src.sim_stock.domain.models import normalize_symbol
from src.sim_stock.domain.repository import StockRepositoryProtocol
from src.sim_stock.infrastructure.persistence import StockRepository

logger = logging.getLogger("sim.stock")


class StockApplicationService:
    def __init__(self, repo: StockRepositoryProtocol | None = None) -> None:
        self._repo: StockRepositoryProtocol = repo or StockRepository()

    async def register_stock(
        self,
        db: AsyncSession,
        symbol: str,
        name: str,
        initial_price: float,
        available_quantity: int,
    ) -> StockResponse:
        symbol = normalize_symbol(symbol)
        name = name.strip()
        if not symbol or not name:
            raise InvalidRequestError("symbol and name must not be blank")
        price = dollars_to_cents(initial_price)
        check_price_range(price)

        async with transaction(db, f"register stock {symbol}"):
            # UNIQUE(symbol) is the final guard against a concurrent insert
            if await self._repo.get_stock_by_symbol(db, symbol) is not None:
                raise StockExistsError(symbol)
            try:
                stock = await self._repo.create_stock(
                    db, symbol, name, price, available_quantity
                )
            except IntegrityError as exc:
                raise StockExistsError(symbol) from exc
            await self._repo.insert_price_history(db, stock.id, stock.current_price)

        logger.info(
            "Registered stock %s at %d cents, %d shares",
            stock.symbol, stock.current_price, stock.available_quantity,
        )
        return StockResponse.from_domain(stock)

    async def price_history(
        self, db: AsyncSession, symbol: str | None
    ) -> list[PriceHistoryItem]:
        lookup = normalize_symbol(symbol) if symbol else None
        points = await self._repo.list_price_history(db, lookup)
        return [PriceHistoryItem.from_domain(p) for p in points]
