"""Pydantic schemas for API request/response validation and serialization."""

from user_service.api.schemas.errors import ErrorResponse
from user_service.api.schemas.users import DeletedUserResponse, UserResponse

__all__ = ["DeletedUserResponse", "ErrorResponse", "UserResponse"]
