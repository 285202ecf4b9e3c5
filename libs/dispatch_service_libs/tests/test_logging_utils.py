"""Tests for logging_utils processors and configuration."""

from __future__ import annotations

import logging
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import pytest
import structlog
from dispatch_service_libs.logging_utils import (
    LoggingOptions,
    add_service_context,
    bind_request_context,
    build_processors,
    configure_service_logging,
    create_service_logger,
)
from structlog.contextvars import clear_contextvars, get_contextvars, merge_contextvars


@pytest.fixture(autouse=True)
def clean_logging_config() -> Generator[None, None, None]:
    """Reset logging and structlog state after each test."""
    yield
    logging.root.handlers.clear()
    logging.root.setLevel(logging.WARNING)
    structlog.reset_defaults()
    clear_contextvars()


class TestAddServiceContext:
    """Tests for the add_service_context processor."""

    def test_adds_service_name_and_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICE_NAME", "public-invoice-service")
        monkeypatch.setenv("ENVIRONMENT", "production")
        event_dict: dict[str, Any] = {"event": "hello", "invoice_id": "abc"}

        result = add_service_context(None, "info", event_dict)

        assert result["service.name"] == "public-invoice-service"
        assert result["deployment.environment"] == "production"
        assert result["invoice_id"] == "abc"

    def test_defaults_when_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SERVICE_NAME", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        result = add_service_context(None, "info", {})

        assert result["service.name"] == "unknown"
        assert result["deployment.environment"] == "development"


class TestBindRequestContext:
    """Tests for request-scoped context binding."""

    def test_binds_fields_and_skips_none(self) -> None:
        bind_request_context(correlation_id="c-1", client_ip="10.0.0.1", user_agent=None)

        context = get_contextvars()
        assert context == {"correlation_id": "c-1", "client_ip": "10.0.0.1"}

    def test_rebinding_clears_previous_request(self) -> None:
        bind_request_context(correlation_id="c-1", client_ip="10.0.0.1")
        bind_request_context(correlation_id="c-2")

        assert get_contextvars() == {"correlation_id": "c-2"}


class TestConfigureServiceLogging:
    """Tests for configure_service_logging side effects."""

    def test_no_file_handler_by_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("LOG_TO_FILE", raising=False)

        configure_service_logging("test-service", log_level="INFO")

        assert not any(isinstance(h, RotatingFileHandler) for h in logging.root.handlers)
        assert list(tmp_path.glob("*.log")) == []

    def test_file_handler_created_when_enabled(self, tmp_path: Path) -> None:
        log_file = tmp_path / "nested" / "service.log"

        configure_service_logging(
            "test-service", log_level="DEBUG", log_to_file=True, log_file_path=str(log_file)
        )

        file_handlers = [h for h in logging.root.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert log_file.parent.exists()
        assert logging.root.level == logging.DEBUG

    def test_create_service_logger_binds_name(self) -> None:
        configure_service_logging("test-service")

        logger = create_service_logger("unit")

        assert logger is not None
        logger.info("logger works", invoice_id="abc")


class TestLoggingOptions:
    """Tests for resolving options from arguments and LOG_* variables."""

    def test_production_defaults_to_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.delenv("LOG_TO_FILE", raising=False)

        options = LoggingOptions.resolve("svc", environment="production")

        assert options.json_output is True
        assert options.log_file is None

    def test_log_format_overrides_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FORMAT", "console")

        options = LoggingOptions.resolve("svc", environment="production", log_level="warning")

        assert options.json_output is False
        assert options.level == logging.WARNING

    def test_file_settings_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LOG_TO_FILE", "yes")
        monkeypatch.setenv("LOG_FILE_PATH", str(tmp_path / "svc.log"))
        monkeypatch.setenv("LOG_MAX_BYTES", "2048")
        monkeypatch.setenv("LOG_BACKUP_COUNT", "3")

        options = LoggingOptions.resolve("svc", environment="development")

        assert options.log_file == tmp_path / "svc.log"
        assert options.max_bytes == 2048
        assert options.backup_count == 3

    def test_unknown_level_is_rejected(self) -> None:
        with pytest.raises(KeyError):
            LoggingOptions.resolve("svc", environment="development", log_level="LOUD")


class TestBuildProcessors:
    """Tests for the renderer chosen at the end of the processor chain."""

    def test_json_chain_ends_with_json_renderer(self) -> None:
        chain = build_processors(json_output=True)

        assert chain[0] is merge_contextvars
        assert isinstance(chain[-1], structlog.processors.JSONRenderer)

    def test_console_chain_ends_with_console_renderer(self) -> None:
        chain = build_processors(json_output=False)

        assert isinstance(chain[-1], structlog.dev.ConsoleRenderer)
