"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_stock.domain.models import PricePoint, Stock


class StockRepositoryProtocol(Protocol):
    async def get_stock_by_symbol(self, db: AsyncSession, symbol: str) -> Stock | None: ...

    async def get_stock_by_id(self, db: AsyncSession, stock_id: int) -> Stock | None: ...

    async def list_stocks(self, db: AsyncSession) -> list[Stock]: ...

    async def create_stock(
        self,
        db: AsyncSession,
        symbol: str,
        name: str,
        price: int,
        available_quantity: int,
    ) -> Stock: ...

    async def update_price(self, db: AsyncSession, stock_id: int, price: int) -> Stock | None: ...

    async def insert_price_history(
        self, db: AsyncSession, stock_id: int, price: int
    ) -> PricePoint: ...

    async def list_price_history(
        self, db: AsyncSession, symbol: str | None
    ) -> list[PricePoint]: ...
