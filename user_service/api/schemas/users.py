"""Response schemas for the user resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """A user as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., ge=1, description="Store-assigned identifier", examples=[1])
    name: str = Field(..., description="Trimmed display name", examples=["Ada"])
    email: str = Field(
        ...,
        description="Trimmed, lower-cased, unique email address",
        examples=["ada@example.com"],
    )
    age: int | None = Field(default=None, ge=0, description="Age, null when unset")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last modification timestamp")


class DeletedUserResponse(BaseModel):
    """Confirmation returned after deleting a user."""

    message: str = Field(
        ...,
        description="Confirmation message",
        examples=["User Ada deleted successfully"],
    )
    user: UserResponse = Field(..., description="The user as it was before deletion")
