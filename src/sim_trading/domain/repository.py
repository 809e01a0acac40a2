"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_stock.domain.models import Stock
from src.sim_trading.domain.models import LockedStock, Transaction
from src.sim_user.domain.models import User


class TradingRepositoryProtocol(Protocol):
    async def get_user(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def get_stock(self, db: AsyncSession, symbol: str) -> Stock | None: ...

    async def held_quantity(self, db: AsyncSession, user_id: int, stock_id: int) -> int: ...

    async def take_inventory(
        self, db: AsyncSession, stock_id: int, quantity: int
    ) -> LockedStock | None: ...

    async def return_inventory(
        self, db: AsyncSession, stock_id: int, quantity: int
    ) -> LockedStock | None: ...

    async def debit_balance(
        self, db: AsyncSession, user_id: int, amount: int, floor: int
    ) -> int | None: ...

    async def credit_balance(
        self, db: AsyncSession, user_id: int, amount: int, floor: int
    ) -> int | None: ...

    async def insert_transaction(
        self,
        db: AsyncSession,
        user_id: int,
        stock_id: int,
        trade_type: str,
        quantity: int,
        price_per_share: int,
        total_amount: int,
    ) -> Transaction: ...
