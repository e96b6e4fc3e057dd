"""Unit tests for the logging setup and formatters."""

import logging
from collections.abc import Generator
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import orjson
import pytest
from pytest_mock import MockerFixture

from user_service.core import logging as log_module
from user_service.core.config import LogConfig, Settings
from user_service.core.logging import (
    InterceptHandler,
    format_console_with_context,
    serialize_for_json,
    setup_logging,
)


def _record(**overrides: Any) -> dict[str, Any]:  # noqa: ANN401
    record: dict[str, Any] = {
        "time": datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=UTC),
        "level": SimpleNamespace(name="INFO"),
        "message": "User created",
        "name": "user_service.api.routes.users",
        "function": "create_user",
        "line": 42,
        "extra": {},
        "exception": None,
    }
    record.update(overrides)
    return record


@pytest.fixture
def reset_logging_state() -> Generator[None]:
    """Reset the configured flag for a test and restore it afterwards."""
    previous = log_module._state.configured
    log_module._state.configured = False
    yield
    log_module._state.configured = previous


@pytest.mark.unit
class TestSerializeForJson:
    """Test cases for serialize_for_json."""

    def test_basic_fields(self) -> None:
        """Test the core fields are serialized as one JSON line."""
        line = serialize_for_json(_record())

        assert line.endswith("\n")
        entry = orjson.loads(line)
        assert entry["level"] == "INFO"
        assert entry["message"] == "User created"
        assert entry["function"] == "create_user"
        assert entry["line"] == 42
        assert entry["timestamp"].startswith("2024-05-01T12:30:00.123")

    def test_extra_fields(self) -> None:
        """Test bound context is merged and private keys are dropped."""
        line = serialize_for_json(
            _record(extra={"correlation_id": "abc", "_internal": 1, "user_id": 3})
        )

        entry = orjson.loads(line)
        assert entry["correlation_id"] == "abc"
        assert entry["user_id"] == 3
        assert "_internal" not in entry

    def test_exception(self) -> None:
        """Test exception type and value are included."""
        exc = SimpleNamespace(type=ValueError, value=ValueError("bad"))

        entry = orjson.loads(serialize_for_json(_record(exception=exc)))

        assert entry["exception"] == {"type": "ValueError", "value": "bad"}


@pytest.mark.unit
class TestFormatConsoleWithContext:
    """Test cases for format_console_with_context."""

    def test_context_fields_rendered(self) -> None:
        """Test priority fields come first and extra fields follow."""
        line = format_console_with_context(
            _record(
                extra={
                    "user_id": 3,
                    "correlation_id": "1234567890abcdef",
                    "duration_ms": 12,
                }
            )
        )

        assert "[<yellow>12345678</yellow>]" in line
        assert "[<yellow>12ms</yellow>]" in line
        assert "[<dim>user_id=3</dim>]" in line
        assert line.index("12345678") < line.index("user_id=3")
        assert line.endswith("User created\n")

    def test_braces_are_escaped(self) -> None:
        """Test braces in messages cannot be read as format fields."""
        line = format_console_with_context(_record(message="payload {name}"))
        assert "payload {{name}}" in line

    def test_exception_placeholder(self) -> None:
        """Test an exception record ends with the exception field."""
        line = format_console_with_context(_record(exception=object()))
        assert line.endswith("{exception}\n")

    def test_sensitive_and_long_values(self) -> None:
        """Test configured sensitive fields are redacted and long values cut."""
        line = format_console_with_context(
            _record(extra={"token": "abc", "payload": "x" * 200})
        )

        assert "token=[REDACTED]" in line
        assert "payload=" + "x" * 97 + "..." in line


@pytest.mark.unit
class TestSetupLogging:
    """Test cases for setup_logging."""

    @pytest.mark.usefixtures("reset_logging_state")
    @pytest.mark.parametrize("formatter", ["console", "json"])
    def test_configures_once(self, mocker: MockerFixture, formatter: str) -> None:
        """Test sinks are installed on the first call only."""
        mock_logger = mocker.patch.object(log_module, "logger")
        mock_basic_config = mocker.patch.object(logging, "basicConfig")
        settings = Settings(log_config=LogConfig(log_formatter_type=formatter))

        setup_logging(settings)
        setup_logging(settings)

        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_called_once()
        mock_basic_config.assert_called_once()
        assert log_module._state.configured

    @pytest.mark.usefixtures("reset_logging_state")
    def test_uvicorn_loggers_intercepted(self, mocker: MockerFixture) -> None:
        """Test uvicorn loggers route through InterceptHandler."""
        mocker.patch.object(log_module, "logger")
        mocker.patch.object(logging, "basicConfig")
        uvicorn_logger = logging.getLogger("uvicorn.access")
        mocker.patch.object(uvicorn_logger, "handlers", [])
        mocker.patch.object(uvicorn_logger, "propagate", True)

        setup_logging(Settings())

        assert isinstance(uvicorn_logger.handlers[0], InterceptHandler)
        assert uvicorn_logger.propagate is False


@pytest.mark.unit
class TestInterceptHandler:
    """Test cases for InterceptHandler."""

    def test_forwards_to_loguru(self, mocker: MockerFixture) -> None:
        """Test a stdlib record is re-emitted through loguru."""
        mock_logger = mocker.patch.object(log_module, "logger")
        mock_logger.level.return_value = SimpleNamespace(name="WARNING")
        record = logging.LogRecord(
            "sqlalchemy", logging.WARNING, __file__, 1, "slow %s", ("query",), None
        )

        InterceptHandler().emit(record)

        mock_logger.opt.return_value.log.assert_called_once_with(
            "WARNING", "slow query"
        )
