"""Closed exception hierarchy for request validation and storage failures.

Every failure the service reports to a client is one of the classes below.
The API layer maps each family to an HTTP status code:

- **ValidationError** (400): malformed body, bad path parameter, bad fields
- **NotFoundError** (404): the addressed user does not exist
- **ConflictError** (409): a write would violate a uniqueness constraint

Anything that is not a ``UserServiceError`` is treated as unexpected and
answered with a 500.

The default message of each concrete class is the exact text returned to
the client in the ``error`` field of the response body.
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for programmatic handling and log filtering."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    MALFORMED_BODY = "MALFORMED_BODY"
    INVALID_ID = "INVALID_ID"
    INVALID_NAME = "INVALID_NAME"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_AGE = "INVALID_AGE"
    EMPTY_UPDATE = "EMPTY_UPDATE"
    NOT_FOUND = "NOT_FOUND"
    EMAIL_CONFLICT = "EMAIL_CONFLICT"


class Severity(Enum):
    """Severity levels used to pick the log level for a handled error."""

    LOW = "LOW"
    """Caused by client input; logged as a warning."""

    MEDIUM = "MEDIUM"
    """Business conflicts that may need attention but are not faults."""

    HIGH = "HIGH"
    """Faults impacting data integrity or availability."""

    CRITICAL = "CRITICAL"
    """Unexpected faults requiring immediate attention."""


class UserServiceError(Exception):
    """Base exception class for all User Service exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message, returned to the client
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Whether the error arises from normal operation (LOW or MEDIUM severity).

        Returns:
            bool: True if the error is expected
        """
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(UserServiceError):
    """Raised when a request is rejected before any storage access.

    Args:
        message: Description of the validation failure
        error_code: Error code identifying which check failed
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class MalformedBodyError(ValidationError):
    """The request body is not valid JSON."""

    def __init__(
        self,
        message: str = "Invalid JSON",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.MALFORMED_BODY, context, cause)


class InvalidIdError(ValidationError):
    """The ``id`` path parameter is not a positive integer."""

    def __init__(
        self,
        message: str = "Invalid ID parameter",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_ID, context, cause)


class InvalidNameError(ValidationError):
    """The ``name`` field is missing, not a string, or blank."""

    def __init__(
        self,
        message: str = "Valid name is required",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_NAME, context, cause)


class InvalidEmailError(ValidationError):
    """The ``email`` field is missing or not an address."""

    def __init__(
        self,
        message: str = "Valid email is required",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_EMAIL, context, cause)


class InvalidAgeError(ValidationError):
    """The ``age`` field is present but not a non-negative integer."""

    def __init__(
        self,
        message: str = "Age must be a positive integer",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_AGE, context, cause)


class EmptyUpdateError(ValidationError):
    """A partial update supplied none of the updatable fields."""

    def __init__(
        self,
        message: str = "No valid update data provided",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.EMPTY_UPDATE, context, cause)


class NotFoundError(UserServiceError):
    """Exception raised when a requested resource cannot be found.

    Args:
        message: Description of what resource was not found
        error_code: Error code (defaults to NOT_FOUND)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_FOUND,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class UserNotFoundError(NotFoundError):
    """No user exists with the requested id."""

    def __init__(
        self,
        message: str = "User not found",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.NOT_FOUND, context, cause)


class ConflictError(UserServiceError):
    """Exception raised when a write violates a uniqueness constraint.

    Args:
        message: Description of the conflict
        error_code: Error code identifying the violated constraint
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.MEDIUM, context, cause)


class EmailConflictError(ConflictError):
    """Another user already owns the email address."""

    def __init__(
        self,
        message: str = "Email already exists",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.EMAIL_CONFLICT, context, cause)
