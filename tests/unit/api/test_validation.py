"""Unit tests for request body decoding and user input validation."""

import pytest
import pytest_check

from user_service.api.validation import (
    parse_json_body,
    validate_user_id,
    validate_user_input,
    validate_user_update,
)
from user_service.core.exceptions import (
    EmptyUpdateError,
    InvalidAgeError,
    InvalidEmailError,
    InvalidIdError,
    InvalidNameError,
    MalformedBodyError,
)


@pytest.mark.unit
class TestParseJsonBody:
    """Test cases for parse_json_body."""

    def test_decodes_object(self) -> None:
        """Test a JSON object is returned as a dict."""
        assert parse_json_body(b'{"name": "Ada"}') == {"name": "Ada"}

    @pytest.mark.parametrize("raw", [b"", b"   ", b"\n"])
    def test_empty_body_is_empty_object(self, raw: bytes) -> None:
        """Test an empty body decodes to an empty payload."""
        assert parse_json_body(raw) == {}

    @pytest.mark.parametrize("raw", [b"[1, 2]", b'"text"', b"42", b"null"])
    def test_non_object_is_empty_object(self, raw: bytes) -> None:
        """Test JSON values other than objects carry no fields."""
        assert parse_json_body(raw) == {}

    @pytest.mark.parametrize("raw", [b"{bad json", b'{"name": }', b"{'a': 1}"])
    def test_malformed_body_raises(self, raw: bytes) -> None:
        """Test undecodable bodies raise MalformedBodyError."""
        with pytest.raises(MalformedBodyError) as exc_info:
            parse_json_body(raw)

        assert exc_info.value.message == "Invalid JSON"
        assert exc_info.value.cause is not None


@pytest.mark.unit
class TestValidateUserId:
    """Test cases for validate_user_id."""

    @pytest.mark.parametrize(("raw", "expected"), [("1", 1), ("42", 42), ("+7", 7)])
    def test_valid_ids(self, raw: str, expected: int) -> None:
        """Test positive integers are accepted and converted."""
        assert validate_user_id(raw) == expected

    @pytest.mark.parametrize("raw", ["0", "-5", "abc", "1.5", "12abc", "", "1_0"])
    def test_invalid_ids(self, raw: str) -> None:
        """Test anything other than a positive integer is rejected."""
        with pytest.raises(InvalidIdError) as exc_info:
            validate_user_id(raw)

        assert exc_info.value.message == "Invalid ID parameter"


@pytest.mark.unit
class TestValidateUserInput:
    """Test cases for full input validation."""

    def test_normalizes_name_and_email(self) -> None:
        """Test name is trimmed and email trimmed and lower-cased."""
        result = validate_user_input(
            {"name": "  Ada Lovelace ", "email": " A@B.COM ", "age": 36}
        )

        with pytest_check.check:
            assert result["name"] == "Ada Lovelace"
        with pytest_check.check:
            assert result["email"] == "a@b.com"
        with pytest_check.check:
            assert result["age"] == 36

    def test_age_is_optional(self) -> None:
        """Test a missing age yields None."""
        result = validate_user_input({"name": "Ada", "email": "ada@example.com"})
        assert result["age"] is None

    def test_integral_float_age_is_accepted(self) -> None:
        """Test 30.0 is stored as the integer 30."""
        result = validate_user_input(
            {"name": "Ada", "email": "ada@example.com", "age": 30.0}
        )
        assert result["age"] == 30
        assert isinstance(result["age"], int)

    def test_zero_age_is_accepted(self) -> None:
        """Test zero is a valid age."""
        result = validate_user_input({"name": "A", "email": "a@b.co", "age": 0})
        assert result["age"] == 0

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "a@b.com"},
            {"name": "", "email": "a@b.com"},
            {"name": "   ", "email": "a@b.com"},
            {"name": 123, "email": "a@b.com"},
            {"name": None, "email": "a@b.com"},
        ],
    )
    def test_invalid_name(self, payload: dict[str, object]) -> None:
        """Test a missing, blank or non-string name is rejected."""
        with pytest.raises(InvalidNameError) as exc_info:
            validate_user_input(payload)

        assert exc_info.value.message == "Valid name is required"

    @pytest.mark.parametrize(
        "email",
        [None, "", "not-an-email", "a@b", "a@@b.com", "a b@c.com", "@b.com", 5],
    )
    def test_invalid_email(self, email: object) -> None:
        """Test emails not matching the address pattern are rejected."""
        with pytest.raises(InvalidEmailError) as exc_info:
            validate_user_input({"name": "A", "email": email})

        assert exc_info.value.message == "Valid email is required"

    @pytest.mark.parametrize("age", [-1, 1.5, "30", True, None, [30]])
    def test_invalid_age(self, age: object) -> None:
        """Test ages that are not non-negative integers are rejected."""
        with pytest.raises(InvalidAgeError) as exc_info:
            validate_user_input({"name": "A", "email": "a@b.com", "age": age})

        assert exc_info.value.message == "Age must be a positive integer"

    def test_name_checked_before_email_and_age(self) -> None:
        """Test the name rule is reported first when several fields are bad."""
        with pytest.raises(InvalidNameError):
            validate_user_input({"name": "", "email": "bad", "age": -1})

    def test_email_checked_before_age(self) -> None:
        """Test the email rule is reported before the age rule."""
        with pytest.raises(InvalidEmailError):
            validate_user_input({"name": "A", "email": "bad", "age": -1})


@pytest.mark.unit
class TestValidateUserUpdate:
    """Test cases for partial input validation."""

    def test_only_supplied_fields_are_returned(self) -> None:
        """Test absent fields are left out of the update."""
        assert validate_user_update({"email": " New@Example.COM"}) == {
            "email": "new@example.com"
        }

    def test_all_fields(self) -> None:
        """Test every field is validated and normalized."""
        result = validate_user_update({"name": " Bo ", "email": "B@C.IO", "age": 3})
        assert result == {"name": "Bo", "email": "b@c.io", "age": 3}

    def test_unknown_fields_are_ignored(self) -> None:
        """Test keys outside name, email and age are dropped."""
        assert validate_user_update({"age": 5, "id": 99, "role": "admin"}) == {
            "age": 5
        }

    @pytest.mark.parametrize("payload", [{}, {"id": 3}, {"nickname": "x"}])
    def test_empty_update_raises(self, payload: dict[str, object]) -> None:
        """Test an update with no recognized field is rejected."""
        with pytest.raises(EmptyUpdateError) as exc_info:
            validate_user_update(payload)

        assert exc_info.value.message == "No valid update data provided"

    def test_shares_rules_with_full_validation(self) -> None:
        """Test a supplied field is held to the same rule as in full validation."""
        with pytest.raises(InvalidNameError):
            validate_user_update({"name": "  "})
        with pytest.raises(InvalidEmailError):
            validate_user_update({"email": "nope"})
        with pytest.raises(InvalidAgeError):
            validate_user_update({"age": -3})

    def test_null_age_is_rejected(self) -> None:
        """Test an explicit null age is not an integer."""
        with pytest.raises(InvalidAgeError):
            validate_user_update({"age": None})
