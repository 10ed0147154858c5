"""
Base Repository.

Base class for all repositories with common CRUD operations.

Owned repositories are bound to a single user at construction time and
add ``user_id == owner`` to every statement they issue, so a record that
belongs to someone else is indistinguishable from one that does not exist.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from viny.backend.core.exceptions import NotFoundError
from viny.backend.core.logging import get_logger
from viny.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses should set the model class:

        class UserRepository(BaseRepository[User]):
            model = User
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _select(self) -> Select:
        """Base SELECT for this model. Owned repositories narrow it to the owner."""
        return select(self.model)

    async def get_by_id(self, id: int) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)

        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")

        return instance

    async def get_by_id_or_none(self, id: int) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            self._select().where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: int, **kwargs: Any) -> ModelType:
        """
        Update an existing record.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: int) -> None:
        """
        Delete a record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def count(self) -> int:
        """Count records visible to this repository."""
        result = await self.session.execute(
            select(func.count()).select_from(self._select().subquery())
        )
        return result.scalar_one()


class OwnedRepository(BaseRepository[ModelType]):
    """
    Repository for records that belong to a user.

        class NoteRepository(OwnedRepository[Note]):
            model = Note

        repo = NoteRepository(session, user_id=current_user.id)
    """

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session)
        self.user_id = user_id

    def _select(self) -> Select:
        return select(self.model).where(self.model.user_id == self.user_id)

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record owned by this repository's user."""
        kwargs["user_id"] = self.user_id
        return await super().create(**kwargs)
