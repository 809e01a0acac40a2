"""UserRepository — concrete implementation of UserRepositoryProtocol.

Loan issuance is a single conditional UPDATE ... RETURNING: the ceiling is
re-checked against the locked row, so a result of 0 rows means either the
user is gone or the loan limit would be exceeded.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.errors import StorageError
from src.sim_user.domain.models import User

_USER_COLUMNS = "id, username, balance, loan_amount, created_at"

_GET_BY_ID_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE id = :user_id
""")

_GET_BY_USERNAME_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE username = :username
""")

_INSERT_USER_SQL = text(f"""
    INSERT INTO users (username, password_hash, balance, loan_amount)
    VALUES (:username, :password_hash, :balance, 0)
    RETURNING {_USER_COLUMNS}
""")

_APPLY_LOAN_SQL = text(f"""
    UPDATE users
    SET balance = balance + :amount,
        loan_amount = loan_amount + :amount
    WHERE id = :user_id AND loan_amount + :amount <= :ceiling
    RETURNING {_USER_COLUMNS}
""")


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        balance=int(row.balance),  # type: ignore[attr-defined]
        loan_amount=int(row.loan_amount),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class UserRepository:
    async def get_user_by_id(self, db: AsyncSession, user_id: int) -> User | None:
        row = (await db.execute(_GET_BY_ID_SQL, {"user_id": user_id})).fetchone()
        return _row_to_user(row) if row else None

    async def get_user_by_username(self, db: AsyncSession, username: str) -> User | None:
        row = (await db.execute(_GET_BY_USERNAME_SQL, {"username": username})).fetchone()
        return _row_to_user(row) if row else None

    async def create_user(
        self, db: AsyncSession, username: str, password_hash: str, balance: int
    ) -> User:
        result = await db.execute(
            _INSERT_USER_SQL,
            {"username": username, "password_hash": password_hash, "balance": balance},
        )
        row = result.fetchone()
        if row is None:
            raise StorageError()
        return _row_to_user(row)

    async def apply_loan(
        self, db: AsyncSession, user_id: int, amount: int, ceiling: int
    ) -> User | None:
        result = await db.execute(
            _APPLY_LOAN_SQL, {"user_id": user_id, "amount": amount, "ceiling": ceiling}
        )
        row = result.fetchone()
        return _row_to_user(row) if row else None
