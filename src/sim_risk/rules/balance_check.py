from src.sim_common.errors import InsufficientFundsError, TradingSuspendedError


def check_trading_allowed(balance: int, floor: int) -> None:
    """Trading stops once the balance has fallen below the suspension floor."""
    if balance < floor:
        raise TradingSuspendedError(balance, floor)


def check_funds(cost: int, balance: int) -> None:
    if cost > balance:
        raise InsufficientFundsError(cost, balance)
