"""Database infrastructure with async SQLAlchemy and the repository pattern.

Core components:
- **base**: Declarative base and common model fields
- **models**: The ``User`` model
- **session**: Async engine and session management
- **repository**: Generic repository with CRUD operations
- **user_repository**: The user store with typed failures
- **dependencies**: FastAPI dependency injection helpers

PostgreSQL (asyncpg) is the production backend; SQLite (aiosqlite) is
supported for local runs and the test suite.
"""

from user_service.infrastructure.database.base import Base, BaseModel
from user_service.infrastructure.database.dependencies import (
    DatabaseSession,
    UserStore,
    get_db,
)
from user_service.infrastructure.database.models import User
from user_service.infrastructure.database.repository import BaseRepository
from user_service.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    create_tables,
    get_async_session,
    get_engine,
    get_session_factory,
)
from user_service.infrastructure.database.user_repository import UserRepository

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "DatabaseSession",
    "User",
    "UserRepository",
    "UserStore",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "create_tables",
    "get_async_session",
    "get_db",
    "get_engine",
    "get_session_factory",
]
