"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
