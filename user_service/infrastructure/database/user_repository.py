"""User store: CRUD over the ``users`` table with typed failures.

The repository only ever raises ``UserNotFoundError`` or
``EmailConflictError`` for the conditions it recognizes. Uniqueness
violations are detected from the ``IntegrityError`` raised when the write is
flushed, so concurrent writers racing for the same email are resolved by the
database constraint rather than by a read-then-write check. Any other
storage error propagates unchanged.

Write operations commit before returning, so a route only answers after its
change is durable and a failing commit surfaces as an error response.
"""

from collections.abc import Mapping

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_service.core.exceptions import EmailConflictError, UserNotFoundError
from user_service.infrastructure.database.models import User
from user_service.infrastructure.database.repository import BaseRepository

UPDATABLE_FIELDS = frozenset({"name", "email", "age"})


def _is_email_conflict(exc: IntegrityError) -> bool:
    """Whether an integrity error was raised by the unique email constraint."""
    detail = str(exc.orig).lower()
    return "uq_users_email" in detail or "users.email" in detail


class UserRepository(BaseRepository[User]):
    """Repository exposing the user store operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def list_all(self) -> list[User]:
        """Return every user ordered by ascending ID."""
        return await self.get_all()

    async def get(self, user_id: int) -> User:
        """Return the user with the given ID.

        Raises:
            UserNotFoundError: If no such user exists.
        """
        user = await self.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(context={"user_id": user_id})
        return user

    async def create_user(self, name: str, email: str, age: int | None = None) -> User:
        """Insert a new user; the store assigns the ID.

        Args:
            name: Normalized name.
            email: Normalized email.
            age: Optional age.

        Returns:
            User: The persisted user.

        Raises:
            EmailConflictError: If another user already has this email.
        """
        try:
            user = await self.create(User(name=name, email=email, age=age))
            await self.session.commit()
        except IntegrityError as e:
            if _is_email_conflict(e):
                raise EmailConflictError(cause=e) from e
            raise
        return user

    async def replace(
        self, user_id: int, name: str, email: str, age: int | None = None
    ) -> User:
        """Overwrite every mutable field of a user.

        An omitted ``age`` clears the stored age.

        Raises:
            UserNotFoundError: If no such user exists.
            EmailConflictError: If the email belongs to a different user.
        """
        return await self.patch(user_id, {"name": name, "email": email, "age": age})

    async def patch(self, user_id: int, fields: Mapping[str, object]) -> User:
        """Overwrite only the supplied fields of a user.

        Args:
            user_id: ID of the user to update.
            fields: Normalized values keyed by field name; keys outside
                ``name``, ``email`` and ``age`` are ignored.

        Returns:
            User: The updated user.

        Raises:
            UserNotFoundError: If no such user exists.
            EmailConflictError: If the email belongs to a different user.
        """
        data = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
        try:
            user = await self.update(user_id, data)
            if user is None:
                raise UserNotFoundError(context={"user_id": user_id})
            await self.session.commit()
        except IntegrityError as e:
            if _is_email_conflict(e):
                raise EmailConflictError(
                    context={"user_id": user_id}, cause=e
                ) from e
            raise
        return user

    async def remove(self, user_id: int) -> User:
        """Delete a user and return its last-known state.

        Raises:
            UserNotFoundError: If no such user exists.
        """
        user = await self.delete(user_id)
        if user is None:
            raise UserNotFoundError(context={"user_id": user_id})
        await self.session.commit()

        logger.debug("Removed user {} ({})", user_id, user.email)
        return user
