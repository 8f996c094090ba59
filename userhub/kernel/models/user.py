"""
User model for the user directory.
"""

from datetime import date
from typing import Optional

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from userhub.kernel.models.base import Base, TimestampMixin, generate_id


class User(Base, TimestampMixin):
    """User account model. `password` always holds a bcrypt hash."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_id,
    )
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    birth_day: Mapped[date] = mapped_column(Date, nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.email}>"


# Columns a caller may write; id and timestamps are owned by the store
USER_WRITABLE_FIELDS = frozenset(
    ("first_name", "last_name", "birth_day", "email", "password", "avatar_url")
)
