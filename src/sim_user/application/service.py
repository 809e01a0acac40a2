"""AccountApplicationService — user registration and loan issuance.

Both operations run inside ``transaction()``: any failure rolls back every
statement issued so far. Loan limits are enforced twice: once against the
snapshot for a precise error message, once by the conditional UPDATE that
actually moves the money.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sim_common.cents import cents_to_dollars, dollars_to_cents
from src.sim_common.database import transaction
from src.sim_common.errors import LoanLimitExceededError, UserNotFoundError, UsernameExistsError
from src.sim_risk.rules.loan_limit import check_loan_amount, check_loan_limit
from src.sim_user.application.schemas import LoanResponse, UserResponse
from src.sim_user.auth.password import hash_password
from src.sim_user.domain.repository import UserRepositoryProtocol
from src.sim_user.infrastructure.persistence import UserRepository

logger = logging.getLogger("sim.account")


class AccountApplicationService:
    def __init__(
        self,
        repo: UserRepositoryProtocol | None = None,
        loan_ceiling: int | None = None,
    ) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._loan_ceiling = (
            loan_ceiling if loan_ceiling is not None
            else dollars_to_cents(settings.MAX_LOAN_AMOUNT)
        )

    async def register(
        self,
        db: AsyncSession,
        username: str,
        password: str,
        initial_balance: float | None = None,
    ) -> UserResponse:
        balance = dollars_to_cents(initial_balance or 0)

        async with transaction(db, f"register user {username}"):
            # UNIQUE(username) is the final guard against a concurrent insert
            if await self._repo.get_user_by_username(db, username) is not None:
                raise UsernameExistsError(username)
            try:
                user = await self._repo.create_user(
                    db, username, hash_password(password), balance
                )
            except IntegrityError as exc:
                raise UsernameExistsError(username) from exc

        logger.info("Registered user %s (id=%d)", user.username, user.id)
        return UserResponse.from_domain(user)

    async def take_loan(self, db: AsyncSession, user_id: int, amount: float) -> LoanResponse:
        amount_cents = dollars_to_cents(amount)
        check_loan_amount(amount_cents)

        async with transaction(db, f"loan for user {user_id}"):
            user = await self._repo.get_user_by_id(db, user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            check_loan_limit(user.loan_amount, amount_cents, self._loan_ceiling)

            updated = await self._repo.apply_loan(db, user_id, amount_cents, self._loan_ceiling)
            if updated is None:
                # A concurrent loan got there first
                current = await self._repo.get_user_by_id(db, user_id)
                current_loan = current.loan_amount if current else user.loan_amount
                raise LoanLimitExceededError(amount_cents, current_loan, self._loan_ceiling)

        logger.info(
            "Loan of %d cents issued to user %d, loan now %d cents",
            amount_cents, user_id, updated.loan_amount,
        )
        return LoanResponse(
            user_id=updated.id,
            amount=cents_to_dollars(amount_cents),
            new_balance=cents_to_dollars(updated.balance),
            new_loan_amount=cents_to_dollars(updated.loan_amount),
        )
