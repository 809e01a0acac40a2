"""TradingRepository — concrete implementation of TradingRepositoryProtocol.

Every mutation is a conditional UPDATE ... RETURNING evaluated against the
locked row. A result of 0 rows means a business constraint was violated
(inventory, funds, suspension floor) and the caller must roll back.

Lock order inside one trade is always stocks row first, users row second.

Transaction ownership: The CALLER (TradingService) is responsible for
committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.errors import StorageError
from src.sim_stock.domain.models import Stock
from src.sim_stock.infrastructure.persistence import StockRepository
from src.sim_trading.domain.models import LockedStock, Transaction
from src.sim_user.domain.models import User
from src.sim_user.infrastructure.persistence import UserRepository

# ---------------------------------------------------------------------------
# SQL: stocks inventory
# ---------------------------------------------------------------------------

_TAKE_INVENTORY_SQL = text("""
    UPDATE stocks
    SET available_quantity = available_quantity - :quantity,
        updated_at = CURRENT_TIMESTAMP
    WHERE id = :stock_id AND available_quantity >= :quantity
    RETURNING id, current_price, available_quantity
""")

_RETURN_INVENTORY_SQL = text("""
    UPDATE stocks
    SET available_quantity = available_quantity + :quantity,
        updated_at = CURRENT_TIMESTAMP
    WHERE id = :stock_id
    RETURNING id, current_price, available_quantity
""")

# ---------------------------------------------------------------------------
# SQL: user balance
# ---------------------------------------------------------------------------

_DEBIT_SQL = text("""
    UPDATE users
    SET balance = balance - :amount
    WHERE id = :user_id AND balance >= :amount AND balance >= :floor
    RETURNING balance
""")

_CREDIT_SQL = text("""
    UPDATE users
    SET balance = balance + :amount
    WHERE id = :user_id AND balance >= :floor
    RETURNING balance
""")

# ---------------------------------------------------------------------------
# SQL: transaction log
# ---------------------------------------------------------------------------

_HELD_QUANTITY_SQL = text("""
    SELECT COALESCE(SUM(CASE WHEN type = 'BUY' THEN quantity ELSE -quantity END), 0) AS held
    FROM transactions
    WHERE user_id = :user_id AND stock_id = :stock_id
""")

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions
        (user_id, stock_id, type, quantity, price_per_share, total_amount)
    VALUES
        (:user_id, :stock_id, :type, :quantity, :price_per_share, :total_amount)
    RETURNING id, user_id, stock_id, type, quantity, price_per_share, total_amount, created_at
""")


def _row_to_locked(row: object) -> LockedStock:
    return LockedStock(
        stock_id=row.id,  # type: ignore[attr-defined]
        current_price=int(row.current_price),  # type: ignore[attr-defined]
        available_quantity=int(row.available_quantity),  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        stock_id=row.stock_id,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        quantity=row.quantity,  # type: ignore[attr-defined]
        price_per_share=int(row.price_per_share),  # type: ignore[attr-defined]
        total_amount=int(row.total_amount),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class TradingRepository:
    """Concrete repository — all mutations atomic at the SQL level."""

    def __init__(self) -> None:
        self._users = UserRepository()
        self._stocks = StockRepository()

    async def get_user(self, db: AsyncSession, user_id: int) -> User | None:
        return await self._users.get_user_by_id(db, user_id)

    async def get_stock(self, db: AsyncSession, symbol: str) -> Stock | None:
        return await self._stocks.get_stock_by_symbol(db, symbol)

    async def held_quantity(self, db: AsyncSession, user_id: int, stock_id: int) -> int:
        result = await db.execute(
            _HELD_QUANTITY_SQL, {"user_id": user_id, "stock_id": stock_id}
        )
        return int(result.scalar_one() or 0)

    async def take_inventory(
        self, db: AsyncSession, stock_id: int, quantity: int
    ) -> LockedStock | None:
        result = await db.execute(
            _TAKE_INVENTORY_SQL, {"stock_id": stock_id, "quantity": quantity}
        )
        row = result.fetchone()
        return _row_to_locked(row) if row else None

    async def return_inventory(
        self, db: AsyncSession, stock_id: int, quantity: int
    ) -> LockedStock | None:
        result = await db.execute(
            _RETURN_INVENTORY_SQL, {"stock_id": stock_id, "quantity": quantity}
        )
        row = result.fetchone()
        return _row_to_locked(row) if row else None

    async def debit_balance(
        self, db: AsyncSession, user_id: int, amount: int, floor: int
    ) -> int | None:
        result = await db.execute(
            _DEBIT_SQL, {"user_id": user_id, "amount": amount, "floor": floor}
        )
        row = result.fetchone()
        return int(row.balance) if row else None

    async def credit_balance(
        self, db: AsyncSession, user_id: int, amount: int, floor: int
    ) -> int | None:
        result = await db.execute(
            _CREDIT_SQL, {"user_id": user_id, "amount": amount, "floor": floor}
        )
        row = result.fetchone()
        return int(row.balance) if row else None

    async def insert_transaction(
        self,
        db: AsyncSession,
        user_id: int,
        stock_id: int,
        trade_type: str,
        quantity: int,
        price_per_share: int,
        total_amount: int,
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": user_id,
                "stock_id": stock_id,
                "type": trade_type,
                "quantity": quantity,
                "price_per_share": price_per_share,
                "total_amount": total_amount,
            },
        )
        row = result.fetchone()
        if row is None:
            raise StorageError()
        return _row_to_transaction(row)
