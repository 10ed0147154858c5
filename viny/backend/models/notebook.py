"""
Notebook Model.

Notes reference their notebook by name, not by foreign key, so the
notebook services own the rename cascade and delete reassignment.
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from viny.backend.models.base import Base, IntegerIdMixin, OwnedMixin, TimestampMixin

DEFAULT_NOTEBOOK_COLOR = "#268bd2"


class Notebook(IntegerIdMixin, TimestampMixin, OwnedMixin, Base):
    """Notebook database model."""

    __tablename__ = "notebooks"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_notebooks_user_name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(
        String(7),
        default=DEFAULT_NOTEBOOK_COLOR,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Notebook(id={self.id}, name={self.name!r})>"
