"""
Tag Model and note/tag join table.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from viny.backend.models.base import Base, CreatedAtMixin, IntegerIdMixin, OwnedMixin

DEFAULT_TAG_COLOR = "#268bd2"

note_tags = Table(
    "note_tags",
    Base.metadata,
    Column("note_id", Integer, ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(IntegerIdMixin, CreatedAtMixin, OwnedMixin, Base):
    """
    Tag database model.

    Names are case-sensitive. The (user_id, name) unique constraint is what
    keeps concurrent creates of the same name from producing duplicates.
    """

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
    )

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(
        String(7),
        default=DEFAULT_TAG_COLOR,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"
