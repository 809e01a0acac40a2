from src.sim_common.errors import InsufficientHoldingsError, InsufficientInventoryError


def check_inventory(quantity: int, available: int) -> None:
    """Buy side: the exchange must still have ``quantity`` shares on offer."""
    if quantity > available:
        raise InsufficientInventoryError(quantity, available)


def check_holdings(quantity: int, held: int) -> None:
    """Sell side: held is derived from the transaction log (BUY - SELL)."""
    if quantity > held:
        raise InsufficientHoldingsError(quantity, held)
