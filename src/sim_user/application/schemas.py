"""Pydantic request/response schemas for sim_user. Money crosses the wire in dollars."""

from pydantic import Field

from src.sim_common.cents import MAX_AMOUNT_DOLLARS, cents_to_dollars
from src.sim_common.response import CamelModel, NonBlankStr
from src.sim_user.domain.models import User

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RegisterUserRequest(CamelModel):
    username: NonBlankStr = Field(..., min_length=1, max_length=64)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=1, max_length=72)
    initial_balance: float | None = Field(
        None,
        allow_inf_nan=False,
        ge=-MAX_AMOUNT_DOLLARS,
        le=MAX_AMOUNT_DOLLARS,
        description="Starting cash in dollars",
    )


class LoanRequest(CamelModel):
    user_id: int
    # Positivity is a loan rule (InvalidAmountError), not a schema rule
    amount: float = Field(
        ..., allow_inf_nan=False, le=MAX_AMOUNT_DOLLARS, description="Loan amount in dollars"
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class UserResponse(CamelModel):
    id: int
    username: str
    balance: float
    loan_amount: float

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            balance=cents_to_dollars(user.balance),
            loan_amount=cents_to_dollars(user.loan_amount),
        )


class LoanResponse(CamelModel):
    user_id: int
    amount: float
    new_balance: float
    new_loan_amount: float
