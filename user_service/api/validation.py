"""Request validation run before any storage access.

The functions here are pure: they take raw path segments or decoded JSON
payloads and either return normalized values or raise one of the
``ValidationError`` subclasses. Full and partial validation share the same
per-field rules, applied in the order name, email, age.

The FastAPI dependencies at the bottom of the module wire these checks into
routes as an ordered guard chain: body decoding first, then the ID path
parameter, then the body fields.
"""

import re
from typing import Annotated, Any, Final, TypedDict

import orjson
from fastapi import Depends, Request

from user_service.core.exceptions import (
    EmptyUpdateError,
    InvalidAgeError,
    InvalidEmailError,
    InvalidIdError,
    InvalidNameError,
    MalformedBodyError,
)

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?\d+", re.ASCII)


class UserInput(TypedDict):
    """Normalized payload for create and full update."""

    name: str
    email: str
    age: int | None


def parse_json_body(raw: bytes) -> dict[str, Any]:
    """Decode a request body into a JSON object.

    An empty body decodes to ``{}``. A JSON value that is not an object
    carries none of the user fields and also yields ``{}``.

    Raises:
        MalformedBodyError: If the body is not valid JSON.
    """
    if not raw.strip():
        return {}
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise MalformedBodyError(cause=e) from e
    return payload if isinstance(payload, dict) else {}


def validate_user_id(raw_id: str) -> int:
    """Parse the ``id`` path segment as a positive integer.

    Raises:
        InvalidIdError: If the segment is not a base-10 integer >= 1.
    """
    if not ID_PATTERN.fullmatch(raw_id) or int(raw_id) < 1:
        raise InvalidIdError(context={"id": raw_id})
    return int(raw_id)


def _validate_name(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidNameError
    return value.strip()


def _validate_email(value: object) -> str:
    if not isinstance(value, str):
        raise InvalidEmailError
    email = value.strip()
    if not EMAIL_PATTERN.match(email):
        raise InvalidEmailError
    return email.lower()


def _validate_age(value: object) -> int:
    # bool is an int subclass but never a valid age
    if isinstance(value, bool):
        raise InvalidAgeError
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise InvalidAgeError
    return value


_FIELD_RULES: Final = (
    ("name", _validate_name),
    ("email", _validate_email),
    ("age", _validate_age),
)


def validate_user_input(payload: dict[str, Any]) -> UserInput:
    """Validate and normalize the body of a create or full update.

    ``name`` and ``email`` are required, ``age`` is optional.

    Returns:
        UserInput: Trimmed name, trimmed lower-cased email, age or None.

    Raises:
        InvalidNameError: If the name is missing, not a string, or blank.
        InvalidEmailError: If the email is missing or not an address.
        InvalidAgeError: If age is present but not a non-negative integer.
    """
    name = _validate_name(payload.get("name"))
    email = _validate_email(payload.get("email"))
    age = _validate_age(payload["age"]) if "age" in payload else None
    return UserInput(name=name, email=email, age=age)


def validate_user_update(payload: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalize the fields present in a partial update.

    Returns:
        dict[str, Any]: Normalized values for the supplied fields only.

    Raises:
        InvalidNameError: If a supplied name is invalid.
        InvalidEmailError: If a supplied email is invalid.
        InvalidAgeError: If a supplied age is invalid.
        EmptyUpdateError: If none of name, email or age was supplied.
    """
    update = {
        field: rule(payload[field]) for field, rule in _FIELD_RULES if field in payload
    }
    if not update:
        raise EmptyUpdateError
    return update


async def json_body(request: Request) -> dict[str, Any]:
    """Dependency decoding the request body once per request."""
    return parse_json_body(await request.body())


def valid_user_id(user_id: str) -> int:
    """Dependency validating the ``user_id`` path parameter."""
    return validate_user_id(user_id)


def full_user_input(
    payload: Annotated[dict[str, Any], Depends(json_body)],
) -> UserInput:
    """Dependency validating a create or full update body."""
    return validate_user_input(payload)


def partial_user_input(
    payload: Annotated[dict[str, Any], Depends(json_body)],
) -> dict[str, Any]:
    """Dependency validating a partial update body."""
    return validate_user_update(payload)


JsonBody = Depends(json_body)
UserId = Annotated[int, Depends(valid_user_id)]
FullUserInput = Annotated[UserInput, Depends(full_user_input)]
PartialUserInput = Annotated[dict[str, Any], Depends(partial_user_input)]
