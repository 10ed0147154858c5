"""
Migration Schemas.

Legacy import records are deliberately lenient: every field is optional
and unknown keys are ignored, so exports from older clients load as-is.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from viny.backend.schemas.base import CamelModel
from viny.backend.schemas.note import NoteResponse
from viny.backend.schemas.notebook import NotebookResponse
from viny.backend.schemas.tag import TagResponse

EXPORT_VERSION = "1.0"


class LegacyNote(CamelModel):
    title: str | None = None
    content: str | None = None
    notebook: str | None = None
    tags: list[str] = Field(default_factory=list)
    status: str | None = None
    is_pinned: bool = False
    is_trashed: bool = False
    created_at: str | None = None
    updated_at: str | None = None
    trashed_at: str | None = None

    @field_validator("tags", "is_pinned", "is_trashed", mode="before")
    @classmethod
    def null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Older clients write null for empty tag lists and unset flags
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class LegacyNotebook(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str | None = None
    description: str | None = Field(default=None, max_length=500)


class ImportRequest(CamelModel):
    """
    Bulk import payload.

    Records are kept raw here and validated one at a time so a bad record
    is reported by index instead of rejecting the whole payload.
    """

    notes: list[Any] = Field(default_factory=list)
    notebooks: list[Any] = Field(default_factory=list)


class ImportIssue(CamelModel):
    kind: str
    index: int
    message: str


class ImportResult(CamelModel):
    imported_notes: int = 0
    imported_notebooks: int = 0
    imported_tags: int = 0
    skipped: int = 0
    errors: list[ImportIssue] = Field(default_factory=list)


class MigrationStats(CamelModel):
    total_notes: int
    active_notes: int
    trashed_notes: int
    pinned_notes: int
    notebooks: int
    tags: int
    by_status: dict[str, int]


class ExportPayload(CamelModel):
    version: str = EXPORT_VERSION
    exported_at: datetime
    notes: list[NoteResponse]
    notebooks: list[NotebookResponse]
    tags: list[TagResponse]
    stats: MigrationStats


class ResetResult(CamelModel):
    deleted_notes: int
    deleted_notebooks: int
    deleted_tags: int
