"""Shared fixtures for user repository tests."""

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from user_service.infrastructure.database.models import User
from user_service.infrastructure.database.user_repository import UserRepository


@pytest.fixture
def mock_session(mocker: MockerFixture) -> AsyncSession:
    """Create a properly mocked async session."""
    mock: AsyncSession = mocker.AsyncMock(spec=AsyncSession)
    return mock


@pytest.fixture
def user_repository(mock_session: AsyncSession) -> UserRepository:
    """Create a user repository over the mocked session."""
    return UserRepository(mock_session)


@pytest.fixture
def sample_user() -> User:
    """A detached user instance."""
    return User(id=1, name="Ada", email="ada@example.com", age=36)
