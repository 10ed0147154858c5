"""
Note Model.
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from viny.backend.models.base import Base, IntegerIdMixin, OwnedMixin, TimestampMixin
from viny.backend.models.tag import Tag, note_tags

DEFAULT_NOTEBOOK = "Personal"


class NoteStatus(str, enum.Enum):
    """Workflow status of a note."""

    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Note(IntegerIdMixin, TimestampMixin, OwnedMixin, Base):
    """
    Note database model.

    ``preview`` is derived from ``content`` and rewritten with it.
    ``trashed_at`` is set exactly while ``is_trashed`` is true.
    ``notebook`` stores the notebook *name*.

    ``tags`` is read-only: links are written through the note_tags table
    by the repository so a tag rewrite is always clear-then-relink.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    preview: Mapped[str] = mapped_column(Text, default="", nullable=False)
    notebook: Mapped[str] = mapped_column(
        String(100),
        default=DEFAULT_NOTEBOOK,
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=NoteStatus.DRAFT.value,
        nullable=False,
    )
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_trashed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    trashed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    tags: Mapped[list[Tag]] = relationship(
        secondary=note_tags,
        viewonly=True,
        lazy="selectin",
        order_by=Tag.name,
    )

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
