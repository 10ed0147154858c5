"""
User Model.

Account record for authentication. Notes, notebooks and tags are all
owned by a user and every query against them is scoped by user id.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from viny.backend.models.base import Base, IntegerIdMixin, TimestampMixin


class User(IntegerIdMixin, TimestampMixin, Base):
    """
    User database model.

    ``refresh_token`` holds the single live refresh token. Issuing a new
    one overwrites it; logout and password changes clear it.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"
