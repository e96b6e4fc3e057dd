"""Database models for the user resource."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from user_service.infrastructure.database.base import BaseModel

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 320


class User(BaseModel):
    """A registered user.

    ``email`` is stored normalized (trimmed, lower-cased) and is unique.
    ``sqlite_autoincrement`` keeps SQLite from handing out the id of a
    deleted row again.
    """

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}  # noqa: RUF012

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH), nullable=False, unique=True
    )
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
