"""Periodic price drift for every registered stock.

The ticker is started/stopped by the FastAPI lifespan handler and runs as a
background ``asyncio.Task``. It ticks once as soon as it starts, then every
``interval_seconds``. Each tick:

1. Lists every stock.
2. For each stock, in its own session and transaction: re-reads the current
   price, applies one random-walk step, writes the price, appends a
   stock_price_history row, commits.
3. Logs and skips any stock whose update fails; the rest of the batch still runs.
"""

import asyncio
import logging
import random
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.sim_common.datetime_utils import utc_now
from src.sim_stock.domain.models import Stock
from src.sim_stock.domain.pricing import draw_change, drift_price
from src.sim_stock.domain.repository import StockRepositoryProtocol
from src.sim_stock.infrastructure.persistence import StockRepository

log = logging.getLogger("sim.pricing")


class PriceTicker:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        interval_seconds: float = 300.0,
        rng: random.Random | None = None,
        repo: StockRepositoryProtocol | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._interval = interval_seconds
        self._rng = rng or random.Random()
        self._repo: StockRepositoryProtocol = repo or StockRepository()
        self._task: asyncio.Task[None] | None = None
        self.last_tick_at: datetime | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background tick loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        log.info("Price ticker started (every %.0fs)", self._interval)

    async def stop(self) -> None:
        """Cancel the background tick loop and wait for it to finish."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        log.info("Price ticker stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                log.exception("Price tick failed")
            await asyncio.sleep(self._interval)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def tick(self) -> int:
        """Run one pricing pass. Returns how many stocks were updated."""
        async with self._session_factory() as db:
            stocks = await self._repo.list_stocks(db)

        if not stocks:
            log.info("No stocks registered; nothing to reprice")
            return 0

        updated = 0
        for stock in stocks:
            if await self._update_one(stock):
                updated += 1

        self.last_tick_at = utc_now()
        log.info("Price tick complete: %d/%d stocks updated", updated, len(stocks))
        return updated

    async def _update_one(self, stock: Stock) -> bool:
        async with self._session_factory() as db:
            try:
                # Re-read inside this transaction; the listing may be stale
                current = await self._repo.get_stock_by_id(db, stock.id)
                if current is None:
                    await db.rollback()
                    return False
                new_price = drift_price(current.current_price, draw_change(self._rng))
                await self._repo.update_price(db, current.id, new_price)
                await self._repo.insert_price_history(db, current.id, new_price)
                await db.commit()
            except Exception:
                await db.rollback()
                log.exception("Error updating price for %s", stock.symbol)
                return False

        log.debug("Updated %s: %d -> %d cents", stock.symbol, current.current_price, new_price)
        return True
