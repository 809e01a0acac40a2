"""Integer arithmetic utilities for cents-based money.

All prices, amounts, and balances are stored as int (cents). Dollars only
appear at the HTTP boundary, where they are converted with the helpers below.
"""

# Request bounds. Every balance, cost and quantity stays far inside BIGINT.
MAX_AMOUNT_DOLLARS: float = 1_000_000_000_000.0   # 10^14 cents
MAX_SHARES: int = 1_000_000_000


def dollars_to_cents(dollars: float) -> int:
    """Convert a dollar amount from a request body to whole cents: 12.345 -> 1235."""
    return int(round(dollars * 100))


def cents_to_dollars(cents: int | None) -> float:
    """Convert cents to a 2-decimal dollar float for responses. None -> 0.0."""
    if cents is None:
        return 0.0
    return round(int(cents) / 100, 2)


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
