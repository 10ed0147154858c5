"""
Migration Service.

Bulk import of legacy client data, full export, per-owner statistics and
reset. Everything runs in the caller's request transaction, so an import
that hits a database error leaves nothing behind.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.core.config import get_app_config
from viny.backend.core.exceptions import AuthorizationError
from viny.backend.core.utils import (
    build_preview,
    dedupe_names,
    is_hex_color,
    parse_timestamp,
    utc_now,
)
from viny.backend.models.note import DEFAULT_NOTEBOOK, NoteStatus
from viny.backend.models.notebook import DEFAULT_NOTEBOOK_COLOR
from viny.backend.repositories.note import NoteRepository
from viny.backend.repositories.notebook import NotebookRepository
from viny.backend.repositories.tag import TagRepository
from viny.backend.schemas.migration import (
    ExportPayload,
    ImportIssue,
    ImportRequest,
    ImportResult,
    LegacyNote,
    LegacyNotebook,
    MigrationStats,
    ResetResult,
)
from viny.backend.schemas.note import NoteResponse
from viny.backend.schemas.notebook import NotebookResponse
from viny.backend.schemas.tag import TagResponse
from viny.backend.services.base import BaseService

UNTITLED = "Untitled"
STATUSES = {status.value for status in NoteStatus}


def _validation_message(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


class MigrationService(BaseService):
    """Service for importing, exporting and wiping an owner's data."""

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session)
        self.user_id = user_id
        self.notes = NoteRepository(session, user_id)
        self.notebooks = NotebookRepository(session, user_id)
        self.tags = TagRepository(session, user_id)

    async def import_data(self, payload: ImportRequest) -> ImportResult:
        """
        Import legacy notes and notebooks for the owner.

        Invalid records are reported in ``errors`` with their index and
        skipped; the rest are imported. Notebooks that already exist are
        counted as skipped. Notebooks referenced by notes but not present
        are created.
        """
        result = ImportResult()
        tags_before = await self.tags.count()
        known = {notebook.name for notebook in await self.notebooks.list_all()}

        self._log_operation(
            "Importing data",
            user_id=self.user_id,
            notes=len(payload.notes),
            notebooks=len(payload.notebooks),
        )

        for index, raw in enumerate(payload.notebooks):
            try:
                legacy = LegacyNotebook.model_validate(raw)
            except PydanticValidationError as e:
                result.errors.append(
                    ImportIssue(kind="notebook", index=index, message=_validation_message(e))
                )
                continue

            name = legacy.name.strip()
            if not name or name in known:
                result.skipped += 1
                continue

            color = legacy.color or DEFAULT_NOTEBOOK_COLOR
            if not is_hex_color(color):
                color = DEFAULT_NOTEBOOK_COLOR
            await self._execute_db_operation(
                "import_notebook",
                self.notebooks.create(name=name, color=color, description=legacy.description),
            )
            known.add(name)
            result.imported_notebooks += 1

        for index, raw in enumerate(payload.notes):
            try:
                legacy = LegacyNote.model_validate(raw)
                fields = self._note_fields(legacy)
            except PydanticValidationError as e:
                result.errors.append(
                    ImportIssue(kind="note", index=index, message=_validation_message(e))
                )
                continue
            except ValueError as e:
                result.errors.append(ImportIssue(kind="note", index=index, message=str(e)))
                continue

            note = await self._execute_db_operation(
                "import_note",
                self.notes.create(**fields),
            )
            tags = await self.tags.ensure_names(dedupe_names(legacy.tags))
            await self.tags.link(note.id, [tag.id for tag in tags])
            result.imported_notes += 1

            if fields["notebook"] not in known:
                await self._execute_db_operation(
                    "import_notebook",
                    self.notebooks.create(name=fields["notebook"]),
                )
                known.add(fields["notebook"])
                result.imported_notebooks += 1

        result.imported_tags = await self.tags.count() - tags_before

        self._log_operation(
            "Import finished",
            user_id=self.user_id,
            notes=result.imported_notes,
            notebooks=result.imported_notebooks,
            tags=result.imported_tags,
            skipped=result.skipped,
            errors=len(result.errors),
        )
        return result

    def _note_fields(self, legacy: LegacyNote) -> dict[str, Any]:
        """
        Map a legacy note onto column values.

        Raises:
            ValueError: If a field cannot be stored
        """
        title = (legacy.title or "").strip() or UNTITLED
        notebook = (legacy.notebook or "").strip() or DEFAULT_NOTEBOOK
        if len(notebook) > 100:
            raise ValueError("notebook: name longer than 100 characters")
        for tag in legacy.tags:
            if len(tag.strip()) > 50:
                raise ValueError(f"tags: {tag[:20]!r}... longer than 50 characters")

        content = legacy.content or ""
        now = utc_now()
        created_at = parse_timestamp(legacy.created_at) or now
        updated_at = parse_timestamp(legacy.updated_at) or created_at

        trashed_at = None
        if legacy.is_trashed:
            trashed_at = parse_timestamp(legacy.trashed_at) or parse_timestamp(legacy.updated_at) or now

        return {
            "title": title[:255],
            "content": content,
            "preview": build_preview(content),
            "notebook": notebook,
            "status": legacy.status if legacy.status in STATUSES else NoteStatus.DRAFT.value,
            "is_pinned": legacy.is_pinned,
            "is_trashed": legacy.is_trashed,
            "trashed_at": trashed_at,
            "created_at": created_at,
            "updated_at": updated_at,
        }

    async def export_data(self) -> ExportPayload:
        """Export every note, notebook and tag of the owner."""
        notes = await self.notes.list_all()
        notebook_rows = await self.notebooks.list_with_counts()
        tag_rows = await self.tags.list_with_counts()

        self._log_operation("Exporting data", user_id=self.user_id, notes=len(notes))
        return ExportPayload(
            exported_at=utc_now(),
            notes=[NoteResponse.model_validate(note) for note in notes],
            notebooks=[
                NotebookResponse.model_validate(notebook).model_copy(update={"note_count": count})
                for notebook, count in notebook_rows
            ],
            tags=[
                TagResponse.model_validate(tag).model_copy(update={"note_count": count})
                for tag, count in tag_rows
            ],
            stats=await self.stats(),
        )

    async def stats(self) -> MigrationStats:
        """Totals for the owner's data."""
        by_status = {status.value: 0 for status in NoteStatus}
        by_status.update(await self.notes.count_by_status())

        return MigrationStats(
            total_notes=await self.notes.count(),
            active_notes=await self.notes.count_where(is_trashed=False),
            trashed_notes=await self.notes.count_where(is_trashed=True),
            pinned_notes=await self.notes.count_where(is_pinned=True),
            notebooks=await self.notebooks.count(),
            tags=await self.tags.count(),
            by_status=by_status,
        )

    async def reset(self) -> ResetResult:
        """
        Permanently delete all of the owner's notes, notebooks and tags.

        Raises:
            AuthorizationError: In production, or when reset is disabled
        """
        app_config = get_app_config()
        if app_config.is_production or not app_config.features.migration_reset_enabled:
            self._logger.warning("Reset refused", extra={"user_id": self.user_id})
            raise AuthorizationError("Data reset is not allowed in this environment")

        deleted_notes = await self.notes.delete_all()
        deleted_tags = await self.tags.delete_all()
        deleted_notebooks = await self.notebooks.delete_all()

        self._log_operation(
            "Data reset",
            user_id=self.user_id,
            notes=deleted_notes,
            notebooks=deleted_notebooks,
            tags=deleted_tags,
        )
        return ResetResult(
            deleted_notes=deleted_notes,
            deleted_notebooks=deleted_notebooks,
            deleted_tags=deleted_tags,
        )
