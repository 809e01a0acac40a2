"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_user.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def get_user_by_id(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def get_user_by_username(self, db: AsyncSession, username: str) -> User | None: ...

    async def create_user(
        self, db: AsyncSession, username: str, password_hash: str, balance: int
    ) -> User: ...

    async def apply_loan(
        self, db: AsyncSession, user_id: int, amount: int, ceiling: int
    ) -> User | None: ...
