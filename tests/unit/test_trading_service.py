"""Unit tests for TradingService using a mock repository.

Amounts are in cents; the service converts to dollars only in its responses.
"""

from unittest.mock import AsyncMock

import pytest

from src.sim_common.errors import AppError
from src.sim_stock.domain.models import Stock
from src.sim_trading.application.schemas import BuyResponse, SellResponse
from src.sim_trading.application.service import TradingService
from src.sim_trading.domain.models import LockedStock, Transaction
from src.sim_user.domain.models import User

FLOOR = -500_000  # -$5,000.00


def _user(balance: int = 100_000) -> User:
    return User(id=1, username="alice", balance=balance, loan_amount=0)


def _stock(price: int = 5000, available: int = 100) -> Stock:
    return Stock(
        id=7, symbol="ACME", name="Acme Corp", current_price=price,
        initial_price=5000, available_quantity=available,
    )


def _txn(trade_type: str, quantity: int, price: int) -> Transaction:
    return Transaction(
        id=11, user_id=1, stock_id=7, type=trade_type, quantity=quantity,
        price_per_share=price, total_amount=quantity * price,
    )


def _repo(user: User | None = None, stock: Stock | None = None) -> AsyncMock:
    repo = AsyncMock()
    repo.get_user.return_value = user if user is not None else _user()
    repo.get_stock.return_value = stock if stock is not None else _stock()
    return repo


class TestBuy:
    async def test_buy_debits_at_locked_price(self) -> None:
        repo = _repo()
        repo.take_inventory.return_value = LockedStock(7, 5000, 90)
        repo.debit_balance.return_value = 50_000
        repo.insert_transaction.return_value = _txn("BUY", 10, 5000)
        svc = TradingService(repo=repo, suspension_floor=FLOOR)
        db = AsyncMock()

        result = await svc.buy(db, 1, "acme", 10)

        assert isinstance(result, BuyResponse)
        assert result.symbol == "ACME"
        assert result.price_per_share == 50.0
        assert result.total_cost == 500.0
        assert result.new_balance == 500.0
        repo.debit_balance.assert_awaited_once_with(db, 1, 50_000, FLOOR)
        assert repo.insert_transaction.call_args.args[3] == "BUY"
        db.commit.assert_awaited_once()

    async def test_cost_uses_price_read_under_lock(self) -> None:
        # The ticker moved the price between the snapshot and the locked update
        repo = _repo(stock=_stock(price=5000))
        repo.take_inventory.return_value = LockedStock(7, 5200, 90)
        repo.debit_balance.return_value = 48_000
        repo.insert_transaction.return_value = _txn("BUY", 10, 5200)
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        result = await svc.buy(AsyncMock(), 1, "ACME", 10)

        assert result.total_cost == 520.0
        assert repo.debit_balance.call_args.args[2] == 52_000

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_invalid_quantity(self, quantity: int) -> None:
        repo = _repo()
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.buy(AsyncMock(), 1, "ACME", quantity)

        assert exc_info.value.code == 4001
        repo.get_user.assert_not_called()

    async def test_user_not_found(self) -> None:
        repo = AsyncMock()
        repo.get_user.return_value = None
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.buy(AsyncMock(), 99, "ACME", 1)

        assert exc_info.value.code == 1002

    async def test_stock_not_found(self) -> None:
        repo = AsyncMock()
        repo.get_user.return_value = _user()
        repo.get_stock.return_value = None
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.buy(AsyncMock(), 1, "NOPE", 1)

        assert exc_info.value.code == 3002
        assert exc_info.value.http_status == 404

    async def test_insufficient_funds_touches_nothing(self) -> None:
        repo = _repo(user=_user(balance=10_000))
        svc = TradingService(repo=repo, suspension_floor=FLOOR)
        db = AsyncMock()

        with pytest.raises(AppError) as exc_info:
            await svc.buy(db, 1, "ACME", 10)

        assert exc_info.value.code == 4002
        repo.take_inventory.assert_not_called()
        repo.debit_balance.assert_not_called()
        db.rollback.assert_awaited_once()
        db.commit.assert_not_called()

    async def test_insufficient_inventory(self) -> None:
        repo = _repo(stock=_stock(available=5))
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.buy(AsyncMock(), 1, "ACME", 10)

        assert exc_info.value.code == 4003

    async def test_inventory_gone_under_lock(self) -> None:
        repo = _repo()
        repo.take_inventory.return_value = None
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.buy(AsyncMock(), 1, "ACME", 10)

        assert exc_info.value.code == 4003
        repo.debit_balance.assert_not_called()

    async def test_debit_miss_after_price_rise_is_insufficient_funds(self) -> None:
        repo = _repo(user=_user(balance=50_000))
        repo.take_inventory.return_value = LockedStock(7, 5100, 90)
        repo.debit_balance.return_value = None
        svc = TradingService(repo=repo, suspension_floor=FLOOR)
        db = AsyncMock()

        with pytest.raises(AppError) as exc_info:
            await svc.buy(db, 1, "ACME", 10)

        assert exc_info.value.code == 4002
        repo.insert_transaction.assert_not_called()
        db.rollback.assert_awaited_once()

    async def test_suspended_user_cannot_buy(self) -> None:
        repo = _repo(user=_user(balance=-600_000))
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.buy(AsyncMock(), 1, "ACME", 1)

        assert exc_info.value.code == 4005
        assert exc_info.value.http_status == 403


class TestSell:
    async def test_sell_credits_at_locked_price(self) -> None:
        repo = _repo(user=_user(balance=50_000))
        repo.held_quantity.return_value = 10
        repo.return_inventory.return_value = LockedStock(7, 5000, 95)
        repo.credit_balance.return_value = 75_000
        repo.insert_transaction.return_value = _txn("SELL", 5, 5000)
        svc = TradingService(repo=repo, suspension_floor=FLOOR)
        db = AsyncMock()

        result = await svc.sell(db, 1, "ACME", 5)

        assert isinstance(result, SellResponse)
        assert result.total_revenue == 250.0
        assert result.new_balance == 750.0
        repo.credit_balance.assert_awaited_once_with(db, 1, 25_000, FLOOR)
        assert repo.insert_transaction.call_args.args[3] == "SELL"
        db.commit.assert_awaited_once()

    async def test_oversell_rejected_without_mutation(self) -> None:
        repo = _repo()
        repo.held_quantity.return_value = 5
        svc = TradingService(repo=repo, suspension_floor=FLOOR)
        db = AsyncMock()

        with pytest.raises(AppError) as exc_info:
            await svc.sell(db, 1, "ACME", 6)

        assert exc_info.value.code == 4004
        repo.return_inventory.assert_not_called()
        repo.credit_balance.assert_not_called()
        db.rollback.assert_awaited_once()

    async def test_holdings_rechecked_under_user_lock(self) -> None:
        repo = _repo()
        # A concurrent sell committed between the snapshot and the user lock
        repo.held_quantity.side_effect = [5, 0]
        repo.return_inventory.return_value = LockedStock(7, 5000, 100)
        repo.credit_balance.return_value = 125_000
        svc = TradingService(repo=repo, suspension_floor=FLOOR)
        db = AsyncMock()

        with pytest.raises(AppError) as exc_info:
            await svc.sell(db, 1, "ACME", 5)

        assert exc_info.value.code == 4004
        repo.insert_transaction.assert_not_called()
        db.rollback.assert_awaited_once()

    async def test_credit_miss_is_suspension(self) -> None:
        repo = _repo()
        repo.get_user.side_effect = [_user(balance=0), _user(balance=-600_000)]
        repo.held_quantity.return_value = 5
        repo.return_inventory.return_value = LockedStock(7, 5000, 100)
        repo.credit_balance.return_value = None
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.sell(AsyncMock(), 1, "ACME", 5)

        assert exc_info.value.code == 4005

    async def test_sell_unknown_stock(self) -> None:
        repo = AsyncMock()
        repo.get_user.return_value = _user()
        repo.get_stock.return_value = None
        svc = TradingService(repo=repo, suspension_floor=FLOOR)

        with pytest.raises(AppError) as exc_info:
            await svc.sell(AsyncMock(), 1, "nope", 1)

        assert exc_info.value.code == 3002
