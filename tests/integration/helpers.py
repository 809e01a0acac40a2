"""Helpers for integration tests: thin wrappers over the HTTP surface."""

from typing import Any

from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


class Api:
    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def register_stock(
        self, symbol: str = "ACME", price: float = 50, quantity: int = 100
    ) -> dict[str, Any]:
        resp = await self.client.post("/api/stocks/register", json={
            "symbol": symbol,
            "name": f"{symbol} Corp",
            "initialPrice": price,
            "availableQuantity": quantity,
        })
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    async def register_user(self, username: str = "alice", balance: float = 1000) -> int:
        resp = await self.client.post("/api/users/register", json={
            "username": username,
            "password": "secret",
            "initialBalance": balance,
        })
        assert resp.status_code == 201, resp.text
        return int(resp.json()["data"]["id"])

    async def buy(self, user_id: int, symbol: str, quantity: int):  # type: ignore[no-untyped-def]
        return await self.client.post("/api/users/buy", json={
            "userId": user_id, "stockSymbol": symbol, "quantity": quantity,
        })

    async def sell(self, user_id: int, symbol: str, quantity: int):  # type: ignore[no-untyped-def]
        return await self.client.post("/api/users/sell", json={
            "userId": user_id, "stockSymbol": symbol, "quantity": quantity,
        })


async def fetch_one(db: AsyncSession, sql: str, **params: Any) -> Any:
    """Read committed state directly, bypassing the API."""
    await db.rollback()
    return (await db.execute(text(sql), params)).fetchone()
