"""Domain models for sim_user — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: int
    username: str
    balance: int        # cents, may be negative down to the suspension floor
    loan_amount: int    # cents, 0 <= loan_amount <= ceiling
    created_at: datetime | str | None = None
