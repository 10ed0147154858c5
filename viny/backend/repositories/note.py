"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model, always scoped to one owner.
"""

from dataclasses import dataclass, field

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from viny.backend.models.note import Note
from viny.backend.models.tag import Tag, note_tags
from viny.backend.repositories.base import OwnedRepository


@dataclass
class NoteFilters:
    """
    Filters for listing notes. Every set filter narrows the result (AND).

    ``tags`` matches notes linked to any of the given names.
    ``search`` is a case-insensitive substring match over title or content.
    """

    notebook: str | None = None
    status: str | None = None
    is_pinned: bool | None = None
    is_trashed: bool | None = None
    search: str | None = None
    tags: list[str] = field(default_factory=list)


class NoteRepository(OwnedRepository[Note]):
    """
    Repository for Note model.

    Inherits owner-scoped CRUD from OwnedRepository and adds filtering,
    notebook-name bookkeeping and trash queries.
    """

    model = Note

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session, user_id)

    def _filtered(self, filters: NoteFilters) -> Select:
        stmt = self._select()

        if filters.notebook is not None:
            stmt = stmt.where(Note.notebook == filters.notebook)
        if filters.status is not None:
            stmt = stmt.where(Note.status == filters.status)
        if filters.is_pinned is not None:
            stmt = stmt.where(Note.is_pinned.is_(filters.is_pinned))
        if filters.is_trashed is not None:
            stmt = stmt.where(Note.is_trashed.is_(filters.is_trashed))
        if filters.search:
            stmt = stmt.where(
                or_(
                    Note.title.icontains(filters.search, autoescape=True),
                    Note.content.icontains(filters.search, autoescape=True),
                )
            )
        if filters.tags:
            tagged = (
                select(note_tags.c.note_id)
                .join(Tag, Tag.id == note_tags.c.tag_id)
                .where(Tag.user_id == self.user_id, Tag.name.in_(filters.tags))
            )
            stmt = stmt.where(Note.id.in_(tagged))

        return stmt

    async def list_filtered(
        self,
        filters: NoteFilters,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Note]:
        """
        List notes matching the filters, pinned first then most recently updated.

        Args:
            filters: Filters to apply
            limit: Maximum number of notes to return
            offset: Number of notes to skip

        Returns:
            List of notes with their tags loaded
        """
        result = await self.session.execute(
            self._filtered(filters)
            .order_by(Note.is_pinned.desc(), Note.updated_at.desc(), Note.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def count_filtered(self, filters: NoteFilters) -> int:
        """Count notes matching the filters."""
        result = await self.session.execute(
            select(func.count()).select_from(self._filtered(filters).subquery())
        )
        return result.scalar_one()

    async def reload(self, id: int) -> Note:
        """
        Re-read a note, overwriting any stale state in the session.

        Used after tag links were rewritten behind the ORM's back.
        """
        result = await self.session.execute(
            self._select()
            .where(Note.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def delete(self, id: int) -> None:
        """Permanently delete a note and its tag links."""
        await self.get_by_id(id)
        await self.session.execute(
            delete(note_tags).where(note_tags.c.note_id == id)
        )
        await super().delete(id)

    async def delete_trashed(self) -> int:
        """Permanently delete all trashed notes of the owner. Returns the count."""
        trashed = select(Note.id).where(
            Note.user_id == self.user_id,
            Note.is_trashed.is_(True),
        )
        await self.session.execute(
            delete(note_tags).where(note_tags.c.note_id.in_(trashed))
        )
        result = await self.session.execute(
            delete(Note)
            .where(Note.user_id == self.user_id, Note.is_trashed.is_(True))
        )
        return result.rowcount

    async def delete_all(self) -> int:
        """Permanently delete every note of the owner. Returns the count."""
        owned = select(Note.id).where(Note.user_id == self.user_id)
        await self.session.execute(
            delete(note_tags).where(note_tags.c.note_id.in_(owned))
        )
        result = await self.session.execute(
            delete(Note)
            .where(Note.user_id == self.user_id)
        )
        return result.rowcount

    # -------------------------------------------------------------------------
    # Notebook-name bookkeeping
    # -------------------------------------------------------------------------

    async def count_in_notebook(self, name: str, include_trashed: bool = True) -> int:
        """Count the owner's notes whose notebook field equals ``name``."""
        stmt = (
            select(func.count())
            .select_from(Note)
            .where(Note.user_id == self.user_id, Note.notebook == name)
        )
        if not include_trashed:
            stmt = stmt.where(Note.is_trashed.is_(False))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def move_notebook(self, old_name: str, new_name: str) -> int:
        """
        Rewrite the notebook field of every owned note from one name to another.

        Returns:
            Number of notes rewritten
        """
        result = await self.session.execute(
            update(Note)
            .where(Note.user_id == self.user_id, Note.notebook == old_name)
            .values(notebook=new_name)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    async def count_where(self, **conditions: bool) -> int:
        """Count owned notes with the given boolean flags, e.g. ``is_trashed=True``."""
        stmt = select(func.count()).select_from(Note).where(Note.user_id == self.user_id)
        for column, value in conditions.items():
            stmt = stmt.where(getattr(Note, column).is_(value))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_by_status(self) -> dict[str, int]:
        """Count owned notes grouped by status."""
        result = await self.session.execute(
            select(Note.status, func.count())
            .where(Note.user_id == self.user_id)
            .group_by(Note.status)
        )
        return {status: count for status, count in result.all()}

    async def list_all(self) -> list[Note]:
        """Every owned note, oldest first. Used by export."""
        result = await self.session.execute(
            self._select().order_by(Note.created_at.asc(), Note.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
