"""
Note Service.

Business logic layer for notes. Orchestrates repositories,
handles validation, and implements business rules:

- ``preview`` is rewritten whenever ``content`` is.
- ``trashed_at`` is set on the transition into the trash and cleared on
  the way out.
- Writing ``tags`` replaces the note's whole tag set.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.core.utils import build_preview, utc_now
from viny.backend.models.note import Note
from viny.backend.repositories.note import NoteFilters, NoteRepository
from viny.backend.schemas.note import NoteCreate, NoteUpdate
from viny.backend.services.base import BaseService
from viny.backend.services.tag import TagService


class NoteService(BaseService):
    """
    Service for note business logic.

    Bound to a single owner: every note it reads or writes belongs to
    ``user_id``.
    """

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session)
        self.user_id = user_id
        self.repo = NoteRepository(session, user_id)
        self.tags = TagService(session, user_id)

    async def list_notes(
        self,
        filters: NoteFilters,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Note], int]:
        """
        List notes with total count for pagination.

        Args:
            filters: Filters to apply (AND-combined)
            limit: Maximum number of notes
            offset: Number to skip for pagination

        Returns:
            Tuple of (notes list, total count)
        """
        notes = await self.repo.list_filtered(filters, limit=limit, offset=offset)
        total = await self.repo.count_filtered(filters)
        return notes, total

    async def get_note(self, note_id: int) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Args:
            data: Note creation data

        Returns:
            Created note with its tags loaded
        """
        self._validate_required({"title": data.title}, ["title"])
        self._log_operation(
            "Creating note",
            user_id=self.user_id,
            title=data.title,
            notebook=data.notebook,
        )

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=data.title,
                content=data.content,
                preview=build_preview(data.content),
                notebook=data.notebook,
                status=data.status.value,
                is_pinned=data.is_pinned,
            ),
        )

        if data.tags:
            await self.tags.set_note_tags(note.id, data.tags)

        self._log_debug("Note created", note_id=note.id)
        return await self.repo.reload(note.id)

    async def update_note(self, note_id: int, data: NoteUpdate) -> Note:
        """
        Apply a partial update to a note.

        Only fields present in ``data`` change. The note's existence is
        checked before anything is written.

        Raises:
            NotFoundError: If note not found
        """
        note = await self.repo.get_by_id(note_id)

        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        new_tags = changes.pop("tags", None)

        if not changes and new_tags is None:
            return note

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(changes.keys()) + (["tags"] if new_tags is not None else []),
        )

        if "status" in changes:
            changes["status"] = data.status.value
        if "content" in changes:
            changes["preview"] = build_preview(changes["content"])
        if "is_trashed" in changes:
            changes.update(self._trash_transition(note, changes["is_trashed"]))

        if new_tags is not None:
            await self.tags.set_note_tags(note_id, new_tags)
            changes["updated_at"] = utc_now()

        if changes:
            await self._execute_db_operation(
                "update_note",
                self.repo.update(note_id, **changes),
            )

        return await self.repo.reload(note_id)

    async def trash_note(self, note_id: int) -> Note:
        """Move a note to the trash."""
        return await self.update_note(note_id, NoteUpdate(is_trashed=True))

    async def restore_note(self, note_id: int) -> Note:
        """Take a note out of the trash."""
        return await self.update_note(note_id, NoteUpdate(is_trashed=False))

    async def delete_note(self, note_id: int) -> None:
        """
        Permanently delete a note and its tag links.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Deleting note", note_id=note_id)
        await self._execute_db_operation("delete_note", self.repo.delete(note_id))

    async def empty_trash(self) -> int:
        """Permanently delete every trashed note. Returns how many were removed."""
        deleted = await self._execute_db_operation(
            "empty_trash",
            self.repo.delete_trashed(),
        )
        self._log_operation("Emptied trash", user_id=self.user_id, deleted=deleted)
        return deleted

    @staticmethod
    def _trash_transition(note: Note, is_trashed: bool) -> dict:
        if is_trashed and not note.is_trashed:
            return {"trashed_at": utc_now()}
        if not is_trashed:
            return {"trashed_at": None}
        return {}
