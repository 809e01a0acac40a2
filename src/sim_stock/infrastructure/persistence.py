"""StockRepository — concrete implementation of StockRepositoryProtocol.

All queries use raw text() SQL (no ORM). Statements stick to the subset shared
by PostgreSQL and SQLite >= 3.35 (RETURNING, CURRENT_TIMESTAMP).
NULL parameter pattern: CAST(:param AS TEXT) IS NULL required for None values.

Transaction ownership: the CALLER (application service or price ticker) opens
and commits the transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.errors import StorageError
from src.sim_stock.domain.models import PricePoint, Stock

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_STOCK_COLUMNS = """
    id, symbol, name, current_price, initial_price, available_quantity,
    created_at, updated_at
"""

_GET_BY_SYMBOL_SQL = text(f"""
    SELECT {_STOCK_COLUMNS}
    FROM stocks
    WHERE symbol = :symbol
""")

_GET_BY_ID_SQL = text(f"""
    SELECT {_STOCK_COLUMNS}
    FROM stocks
    WHERE id = :stock_id
""")

_LIST_SQL = text(f"""
    SELECT {_STOCK_COLUMNS}
    FROM stocks
    ORDER BY id
""")

_INSERT_STOCK_SQL = text(f"""
    INSERT INTO stocks (symbol, name, current_price, initial_price, available_quantity)
    VALUES (:symbol, :name, :price, :price, :available_quantity)
    RETURNING {_STOCK_COLUMNS}
""")

_UPDATE_PRICE_SQL = text(f"""
    UPDATE stocks
    SET current_price = :price,
        updated_at = CURRENT_TIMESTAMP
    WHERE id = :stock_id
    RETURNING {_STOCK_COLUMNS}
""")

_INSERT_HISTORY_SQL = text("""
    INSERT INTO stock_price_history (stock_id, price)
    VALUES (:stock_id, :price)
    RETURNING id, stock_id, price, recorded_at
""")

_LIST_HISTORY_SQL = text("""
    SELECT h.id, h.stock_id, h.price, h.recorded_at, s.symbol, s.name
    FROM stock_price_history h
    JOIN stocks s ON s.id = h.stock_id
    WHERE CAST(:symbol AS TEXT) IS NULL OR s.symbol = CAST(:symbol AS TEXT)
    ORDER BY h.recorded_at ASC, h.id ASC
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_stock(row: object) -> Stock:
    return Stock(
        id=row.id,  # type: ignore[attr-defined]
        symbol=row.symbol,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        current_price=int(row.current_price),  # type: ignore[attr-defined]
        initial_price=int(row.initial_price),  # type: ignore[attr-defined]
        available_quantity=int(row.available_quantity),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_price_point(row: object) -> PricePoint:
    return PricePoint(
        id=row.id,  # type: ignore[attr-defined]
        stock_id=row.stock_id,  # type: ignore[attr-defined]
        price=int(row.price),  # type: ignore[attr-defined]
        recorded_at=row.recorded_at,  # type: ignore[attr-defined]
        symbol=getattr(row, "symbol", None),
        name=getattr(row, "name", None),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class StockRepository:
    async def get_stock_by_symbol(self, db: AsyncSession, symbol: str) -> Stock | None:
        row = (await db.execute(_GET_BY_SYMBOL_SQL, {"symbol": symbol})).fetchone()
        return _row_to_stock(row) if row else None

    async def get_stock_by_id(self, db: AsyncSession, stock_id: int) -> Stock | None:
        row = (await db.execute(_GET_BY_ID_SQL, {"stock_id": stock_id})).fetchone()
        return _row_to_stock(row) if row else None

    async def list_stocks(self, db: AsyncSession) -> list[Stock]:
        rows = (await db.execute(_LIST_SQL)).fetchall()
        return [_row_to_stock(row) for row in rows]

    async def create_stock(
        self,
        db: AsyncSession,
        symbol: str,
        name: str,
        price: int,
        available_quantity: int,
    ) -> Stock:
        result = await db.execute(
            _INSERT_STOCK_SQL,
            {
                "symbol": symbol,
                "name": name,
                "price": price,
                "available_quantity": available_quantity,
            },
        )
        row = result.fetchone()
        if row is None:
            raise StorageError()
        return _row_to_stock(row)

    async def update_price(self, db: AsyncSession, stock_id: int, price: int) -> Stock | None:
        result = await db.execute(_UPDATE_PRICE_SQL, {"stock_id": stock_id, "price": price})
        row = result.fetchone()
        return _row_to_stock(row) if row else None

    async def insert_price_history(
        self, db: AsyncSession, stock_id: int, price: int
    ) -> PricePoint:
        result = await db.execute(_INSERT_HISTORY_SQL, {"stock_id": stock_id, "price": price})
        row = result.fetchone()
        if row is None:
            raise StorageError()
        return _row_to_price_point(row)

    async def list_price_history(
        self, db: AsyncSession, symbol: str | None
    ) -> list[PricePoint]:
        rows = (await db.execute(_LIST_HISTORY_SQL, {"symbol": symbol})).fetchall()
        return [_row_to_price_point(row) for row in rows]
