"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import Field, computed_field, field_validator

from viny.backend.models.note import DEFAULT_NOTEBOOK, NoteStatus
from viny.backend.schemas.base import CamelModel
from viny.backend.schemas.notebook import clean_notebook_name


def _clean_tags(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    for tag in value:
        if len(tag.strip()) > 50:
            raise ValueError("Tag names must be at most 50 characters")
    return value


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["Meeting notes"],
    )
    content: str = Field(
        default="",
        description="Markdown body",
        examples=["# Agenda\n- roadmap"],
    )
    notebook: str = Field(
        default=DEFAULT_NOTEBOOK,
        min_length=1,
        max_length=100,
        description="Notebook name",
    )
    status: NoteStatus = Field(default=NoteStatus.DRAFT)
    is_pinned: bool = Field(default=False)
    tags: list[str] = Field(default_factory=list, description="Tag names")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title must not be blank")
        return value

    @field_validator("notebook")
    @classmethod
    def strip_notebook(cls, value):
        return clean_notebook_name(value)

    @field_validator("tags")
    @classmethod
    def tag_lengths(cls, value):
        return _clean_tags(value)


class NoteUpdate(CamelModel):
    """
    Schema for a partial note update.

    Only fields present in the request body are applied.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = None
    notebook: str | None = Field(default=None, min_length=1, max_length=100)
    status: NoteStatus | None = None
    is_pinned: bool | None = None
    is_trashed: bool | None = None
    tags: list[str] | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Title must not be blank")
        return value

    @field_validator("notebook")
    @classmethod
    def strip_notebook(cls, value):
        return clean_notebook_name(value)

    @field_validator("tags")
    @classmethod
    def tag_lengths(cls, value):
        return _clean_tags(value)


class NoteResponse(CamelModel):
    """Schema for a note in API responses."""

    id: int
    title: str
    content: str
    preview: str
    notebook: str
    status: NoteStatus
    is_pinned: bool
    is_trashed: bool
    created_at: datetime
    updated_at: datetime
    trashed_at: datetime | None
    tags: list[str] = Field(
        default_factory=list,
        validation_alias="tag_names",
    )

    @computed_field
    @property
    def date(self) -> str:
        """Creation day as YYYY-MM-DD."""
        return self.created_at.strftime("%Y-%m-%d")


class EmptyTrashResponse(CamelModel):
    deleted: int
