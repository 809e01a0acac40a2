from src.sim_common.errors import PriceOutOfRangeError

MIN_PRICE_CENTS: int = 100      # $1.00
MAX_PRICE_CENTS: int = 10_000   # $100.00


def check_price_range(price: int) -> None:
    """Raise PriceOutOfRangeError if price (cents) is not in [100, 10000]."""
    if not (MIN_PRICE_CENTS <= price <= MAX_PRICE_CENTS):
        raise PriceOutOfRangeError(price)
