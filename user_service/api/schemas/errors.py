"""Error response schema shared by every exception handler.

Client errors carry only ``error``; unexpected failures add ``message`` with
the fault detail. ``message`` is omitted from the serialized body when unset.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: str = Field(
        ...,
        description="Human-readable error summary",
        examples=["User not found", "Valid email is required"],
    )

    message: str | None = Field(
        default=None,
        description="Detail of an unexpected failure (500 responses only)",
        examples=["connection refused"],
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "Invalid ID parameter"},
                {"error": "Email already exists"},
                {
                    "error": "Something went wrong!",
                    "message": "connection refused",
                },
            ]
        }
    }

    def to_content(self) -> dict[str, str]:
        """Serialize for a JSON response, dropping unset fields."""
        return self.model_dump(mode="json", exclude_none=True)
