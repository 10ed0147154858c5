"""
Tag Schemas.
"""

from datetime import datetime

from pydantic import Field, field_validator

from viny.backend.models.tag import DEFAULT_TAG_COLOR
from viny.backend.schemas.base import CamelModel

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class TagCreate(CamelModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=50, examples=["work"])
    color: str = Field(default=DEFAULT_TAG_COLOR, pattern=HEX_COLOR)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Tag name must not be blank")
        return value


class TagUpdate(CamelModel):
    """Schema for updating a tag. Only supplied fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=HEX_COLOR)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Tag name must not be blank")
        return value


class TagResponse(CamelModel):
    id: int
    name: str
    color: str
    created_at: datetime
    note_count: int = 0
