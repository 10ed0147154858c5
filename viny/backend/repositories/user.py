"""
User Repository.

Data access layer for user accounts. Not owner-scoped: this is where
owners come from.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.models.user import User
from viny.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_email(self, email: str) -> User | None:
        """Look up a user by email."""
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check whether an email is already registered."""
        return await self.get_by_email(email) is not None

    async def get_with_refresh_token(self, id: int, refresh_token: str) -> User | None:
        """Find a user only if ``refresh_token`` is the one currently stored."""
        result = await self.session.execute(
            select(User).where(User.id == id, User.refresh_token == refresh_token)
        )
        return result.scalar_one_or_none()
