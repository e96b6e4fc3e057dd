"""FastAPI dependency injection for database sessions and repositories.

Each request gets its own ``AsyncSession``. The user store commits its own
writes before the route answers; the session is rolled back when the request
raises. The ``UserStore`` alias hands route handlers a ``UserRepository``
bound to that session.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from user_service.infrastructure.database.session import get_async_session
from user_service.infrastructure.database.user_repository import UserRepository


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide a database session for FastAPI dependency injection.

    Yields:
        AsyncSession: Session committed on success, rolled back on error.
    """
    async with get_async_session() as session:
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def get_user_repository(session: DatabaseSession) -> UserRepository:
    """Build the user repository for the current request's session.

    Args:
        session: The request-scoped database session.

    Returns:
        UserRepository: Repository bound to the session.
    """
    return UserRepository(session)


UserStore = Annotated[UserRepository, Depends(get_user_repository)]
