"""
Notebook Repository.

Data access layer for notebooks.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.models.note import Note
from viny.backend.models.notebook import Notebook
from viny.backend.repositories.base import OwnedRepository


class NotebookRepository(OwnedRepository[Notebook]):
    """Repository for Notebook model."""

    model = Notebook

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session, user_id)

    async def list_with_counts(self) -> list[tuple[Notebook, int]]:
        """
        List the owner's notebooks alphabetically with a live note count.

        The count covers non-trashed notes of the same owner whose notebook
        field equals the notebook's name.

        Returns:
            List of (notebook, note_count) pairs
        """
        note_count = (
            select(func.count(Note.id))
            .where(
                Note.user_id == Notebook.user_id,
                Note.notebook == Notebook.name,
                Note.is_trashed.is_(False),
            )
            .correlate(Notebook)
            .scalar_subquery()
        )
        result = await self.session.execute(
            select(Notebook, note_count.label("note_count"))
            .where(Notebook.user_id == self.user_id)
            .order_by(Notebook.name.asc())
        )
        return [(notebook, count) for notebook, count in result.all()]

    async def exists_by_name(self, name: str, exclude_id: int | None = None) -> bool:
        """Check whether the owner already has a notebook with this name."""
        stmt = self._select().where(Notebook.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Notebook.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_all(self) -> list[Notebook]:
        """Every owned notebook, alphabetical. Used by export."""
        result = await self.session.execute(
            self._select().order_by(Notebook.name.asc())
        )
        return list(result.scalars().all())

    async def delete_all(self) -> int:
        """Delete every notebook of the owner. Returns the count."""
        result = await self.session.execute(
            delete(Notebook).where(Notebook.user_id == self.user_id)
        )
        return result.rowcount
