"""
Notebook Schemas.
"""

from datetime import datetime

from pydantic import Field, field_validator

from viny.backend.models.notebook import DEFAULT_NOTEBOOK_COLOR
from viny.backend.schemas.base import CamelModel

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


def clean_notebook_name(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Notebook name must not be blank")
    return value


class NotebookCreate(CamelModel):
    """Schema for creating a notebook."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Work"])
    color: str = Field(default=DEFAULT_NOTEBOOK_COLOR, pattern=HEX_COLOR)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value):
        return clean_notebook_name(value)


class NotebookUpdate(CamelModel):
    """
    Schema for updating a notebook.

    Renaming rewrites the notebook field of every note filed under the old name.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value):
        return clean_notebook_name(value)


class NotebookResponse(CamelModel):
    id: int
    name: str
    color: str
    description: str | None
    created_at: datetime
    updated_at: datetime
    note_count: int = 0


class NotebookDeleteResponse(CamelModel):
    """Result of deleting a notebook."""

    reassigned_notes: int = Field(
        ...,
        description="Notes moved to the default notebook",
    )
