"""Tests for Result[T, E] implementation."""

from dataclasses import dataclass

import pytest
from dispatch_service_libs import Result


@dataclass
class CustomError:
    """Custom error type for testing."""

    code: str
    message: str


class TestResultOk:
    """Tests for Result.ok() success path."""

    def test_ok_creates_success_result(self) -> None:
        result: Result[str, str] = Result.ok("success")

        assert result.is_ok
        assert not result.is_err
        assert result.value == "success"

    def test_ok_accessing_error_raises_value_error(self) -> None:
        result: Result[str, str] = Result.ok("success")

        with pytest.raises(ValueError, match="Called error on Result.ok"):
            _ = result.error

    def test_none_is_a_valid_success_value(self) -> None:
        result: Result[str | None, str] = Result.ok(None)

        assert result.is_ok
        assert result.value is None


class TestResultErr:
    """Tests for Result.err() error path."""

    def test_err_creates_error_result_with_custom_dataclass(self) -> None:
        error = CustomError(code="UNAVAILABLE", message="Upstream down")
        result: Result[str, CustomError] = Result.err(error)

        assert result.is_err
        assert not result.is_ok
        assert result.error == error
        assert result.error.code == "UNAVAILABLE"

    def test_err_accessing_value_raises_value_error(self) -> None:
        result: Result[str, str] = Result.err("error")

        with pytest.raises(ValueError, match="Called value on Result.err"):
            _ = result.value


class TestResultProperties:
    """Tests for Result properties and immutability."""

    def test_result_is_frozen_dataclass(self) -> None:
        result: Result[str, str] = Result.ok("value")

        with pytest.raises(AttributeError):
            result._value = "changed"  # type: ignore

        with pytest.raises(AttributeError):
            result._error = "changed"  # type: ignore

    def test_function_returning_result(self) -> None:
        def divide(a: int, b: int) -> Result[float, str]:
            if b == 0:
                return Result.err("division_by_zero")
            return Result.ok(a / b)

        assert divide(10, 2).value == 5.0
        assert divide(10, 0).error == "division_by_zero"
