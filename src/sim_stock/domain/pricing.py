"""Bounded random walk for stock prices.

Each tick draws a uniform change in [-5%, +5%], applies it multiplicatively,
clamps to [$1.00, $100.00] and rounds to whole cents. Pure functions only;
the scheduling side lives in application/price_ticker.py.
"""

import random

from src.sim_risk.rules.price_range import MAX_PRICE_CENTS, MIN_PRICE_CENTS

MAX_DRIFT: float = 0.05


def draw_change(rng: random.Random | None = None) -> float:
    """Uniform percentage change in [-MAX_DRIFT, +MAX_DRIFT]."""
    return (rng or random).uniform(-MAX_DRIFT, MAX_DRIFT)


def clamp_price(price: float) -> float:
    return max(float(MIN_PRICE_CENTS), min(price, float(MAX_PRICE_CENTS)))


def drift_price(current: int, change: float) -> int:
    """Apply ``change`` to ``current`` (cents) and return the bounded new price in cents."""
    return int(round(clamp_price(current * (1 + change))))
