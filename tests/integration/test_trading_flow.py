"""Integration tests for buy/sell against a real SQLite ledger."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.integration.helpers import Api, fetch_one


async def _inventory(db: AsyncSession, symbol: str) -> int:
    row = await fetch_one(db, "SELECT available_quantity FROM stocks WHERE symbol = :s", s=symbol)
    return int(row.available_quantity)


async def _balance(db: AsyncSession, user_id: int) -> int:
    row = await fetch_one(db, "SELECT balance FROM users WHERE id = :id", id=user_id)
    return int(row.balance)


class TestAcmeScenario:
    async def test_buy_sell_oversell(self, api: Api, db: AsyncSession) -> None:
        await api.register_stock("ACME", price=50, quantity=100)
        alice = await api.register_user("alice", 1000)

        resp = await api.buy(alice, "ACME", 10)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["symbol"] == "ACME"
        assert data["quantity"] == 10
        assert data["pricePerShare"] == 50.0
        assert data["totalCost"] == 500.0
        assert data["newBalance"] == 500.0
        assert data["transactionId"] > 0
        assert await _inventory(db, "ACME") == 90

        resp = await api.sell(alice, "ACME", 5)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["totalRevenue"] == 250.0
        assert data["newBalance"] == 750.0
        assert await _inventory(db, "ACME") == 95

        resp = await api.sell(alice, "ACME", 6)
        assert resp.status_code == 400
        assert resp.json()["code"] == 4004
        assert await _inventory(db, "ACME") == 95
        assert await _balance(db, alice) == 75_000
        row = await fetch_one(db, "SELECT COUNT(*) AS n FROM transactions WHERE user_id = :u", u=alice)
        assert row.n == 2


class TestBuyRejections:
    async def test_insufficient_funds_leaves_state_unchanged(
        self, api: Api, db: AsyncSession
    ) -> None:
        await api.register_stock("ACME", price=50, quantity=100)
        poor = await api.register_user("poor", 100)

        resp = await api.buy(poor, "ACME", 10)

        assert resp.status_code == 400
        assert resp.json()["code"] == 4002
        assert await _balance(db, poor) == 10_000
        assert await _inventory(db, "ACME") == 100

    async def test_insufficient_inventory(self, api: Api) -> None:
        await api.register_stock("ACME", price=1, quantity=3)
        alice = await api.register_user("alice", 1000)

        resp = await api.buy(alice, "ACME", 4)

        assert resp.status_code == 400
        assert resp.json()["code"] == 4003

    async def test_buy_whole_balance(self, api: Api, db: AsyncSession) -> None:
        await api.register_stock("ACME", price=50, quantity=100)
        alice = await api.register_user("alice", 500)

        resp = await api.buy(alice, "ACME", 10)

        assert resp.status_code == 200
        assert await _balance(db, alice) == 0

    async def test_unknown_user_and_stock(self, api: Api) -> None:
        await api.register_stock("ACME")
        alice = await api.register_user("alice")

        resp = await api.buy(999, "ACME", 1)
        assert resp.status_code == 404
        assert resp.json()["code"] == 1002

        resp = await api.buy(alice, "NOPE", 1)
        assert resp.status_code == 404
        assert resp.json()["code"] == 3002

    async def test_zero_quantity(self, api: Api) -> None:
        await api.register_stock("ACME")
        alice = await api.register_user("alice")

        resp = await api.buy(alice, "ACME", 0)

        assert resp.status_code == 400
        assert resp.json()["code"] == 4001

    async def test_missing_quantity(self, client: AsyncClient) -> None:
        resp = await client.post("/api/users/buy", json={"userId": 1, "stockSymbol": "ACME"})

        assert resp.status_code == 400
        assert resp.json()["code"] == 9001

    async def test_suspended_user_is_forbidden(self, api: Api) -> None:
        await api.register_stock("ACME")
        broke = await api.register_user("broke", -6000)

        resp = await api.buy(broke, "ACME", 1)
        assert resp.status_code == 403
        assert resp.json()["code"] == 4005

        resp = await api.sell(broke, "ACME", 1)
        assert resp.status_code == 403


class TestLedgerAccounting:
    async def test_balance_is_initial_minus_costs_plus_revenue(
        self, api: Api, db: AsyncSession
    ) -> None:
        await api.register_stock("AAA", price=12.34, quantity=1000)
        await api.register_stock("BBB", price=99.99, quantity=1000)
        alice = await api.register_user("alice", 5000)

        trades = [
            ("buy", "AAA", 7), ("buy", "BBB", 3), ("sell", "AAA", 2),
            ("buy", "AAA", 11), ("sell", "BBB", 3), ("sell", "AAA", 16),
        ]
        for side, symbol, qty in trades:
            resp = await (api.buy if side == "buy" else api.sell)(alice, symbol, qty)
            assert resp.status_code == 200, resp.text

        row = await fetch_one(db, """
            SELECT
                COALESCE(SUM(CASE WHEN type = 'BUY' THEN total_amount ELSE 0 END), 0) AS cost,
                COALESCE(SUM(CASE WHEN type = 'SELL' THEN total_amount ELSE 0 END), 0) AS revenue
            FROM transactions WHERE user_id = :u
        """, u=alice)
        assert await _balance(db, alice) == 500_000 - row.cost + row.revenue
        assert await _inventory(db, "AAA") == 1000
        assert await _inventory(db, "BBB") == 1000

    async def test_holdings_never_negative(self, api: Api, db: AsyncSession) -> None:
        await api.register_stock("ACME", price=10, quantity=100)
        alice = await api.register_user("alice", 1000)
        await api.buy(alice, "ACME", 3)

        for _ in range(5):
            await api.sell(alice, "ACME", 1)

        row = await fetch_one(db, """
            SELECT SUM(CASE WHEN type = 'BUY' THEN quantity ELSE -quantity END) AS held
            FROM transactions WHERE user_id = :u
        """, u=alice)
        assert row.held == 0
