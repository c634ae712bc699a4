"""Testes abrangentes para config.logging.

Cobre: configure_logging, get_logger, CorrelationIdFilter,
create_json_formatter e create_text_formatter.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    configure_logging,
    create_json_formatter,
    create_text_formatter,
    get_logger,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _record(msg: str = "message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    def test_configure_logging_default_level(self) -> None:
        """Configura logging com nível padrão INFO."""
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_configure_logging_levels(self, level: str, expected: int) -> None:
        """Aceita níveis válidos sem diferenciar maiúsculas."""
        configure_logging(level=level)
        assert logging.getLogger().level == expected

    def test_configure_logging_invalid_level_raises(self) -> None:
        """Nível inválido levanta ValueError."""
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers(self) -> None:
        """Configure_logging substitui handlers existentes."""
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1

    def test_configure_logging_with_correlation_id_getter(self) -> None:
        """Handler recebe o CorrelationIdFilter."""
        configure_logging(correlation_id_getter=lambda: "custom-corr-id")
        handler = logging.getLogger().handlers[0]
        assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)

    def test_configure_logging_quiets_http_client_loggers(self) -> None:
        """httpx/httpcore não logam URLs de request em INFO."""
        configure_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_configure_logging_text_output(self) -> None:
        """json_output=False usa formatter texto."""
        configure_logging(json_output=False)
        formatter = logging.getLogger().handlers[0].formatter
        assert formatter is not None
        assert "cid=%(correlation_id)s" in formatter._fmt  # type: ignore[operator]

    def test_valid_log_levels_constant(self) -> None:
        """VALID_LOG_LEVELS contém os níveis esperados."""
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS

    def test_default_service_name_constant(self) -> None:
        """DEFAULT_SERVICE_NAME está definido."""
        assert DEFAULT_SERVICE_NAME == "lark_gateway"


class TestGetLogger:
    """Testes para get_logger."""

    def test_get_logger_returns_logger(self) -> None:
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        assert get_logger("same.module") is get_logger("same.module")


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_filter_adds_correlation_id_from_getter(self) -> None:
        """Filter adiciona correlation_id do getter."""
        filter_ = CorrelationIdFilter("my_service", lambda: "corr-123")
        record = _record()
        assert filter_.filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "my_service"

    def test_filter_preserves_explicit_correlation_id(self) -> None:
        """Filter preserva correlation_id passado via extra."""
        filter_ = CorrelationIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.correlation_id = "explicit-id"
        filter_.filter(record)
        assert record.correlation_id == "explicit-id"

    def test_filter_replaces_empty_explicit_correlation_id(self) -> None:
        """correlation_id=None em `extra` cai para o getter."""
        filter_ = CorrelationIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.correlation_id = None
        filter_.filter(record)
        assert record.correlation_id == "from-getter"

    def test_filter_uses_empty_string_when_no_getter(self) -> None:
        """Filter usa string vazia quando não há getter."""
        filter_ = CorrelationIdFilter("service_name", None)
        record = _record()
        filter_.filter(record)
        assert record.correlation_id == ""
        assert record.service == "service_name"


class TestFormatters:
    """Testes para os formatters e constantes."""

    def test_required_log_fields_content(self) -> None:
        expected = {"asctime", "levelname", "name", "message", "correlation_id", "service"}
        assert set(REQUIRED_LOG_FIELDS) == expected

    def test_field_rename_map_content(self) -> None:
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_json_formatter_renames_fields_and_keeps_extra(self) -> None:
        """Record vira JSON com level/logger renomeados e extras preservados."""
        formatter = create_json_formatter()
        record = _record("lark_message_sent")
        record.correlation_id = "abc-123"
        record.service = "lark_gateway"
        record.account_id = "default"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "lark_message_sent"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "test.logger"
        assert payload["correlation_id"] == "abc-123"
        assert payload["account_id"] == "default"

    def test_text_formatter_includes_service_and_correlation(self) -> None:
        record = _record("lark_token_refreshed")
        record.correlation_id = "cid-9"
        record.service = "svc"

        output = create_text_formatter().format(record)

        assert "[svc]" in output
        assert "lark_token_refreshed" in output
        assert "cid=cid-9" in output


class TestLoggingIntegration:
    """Testes de integração do sistema de logging."""

    def test_full_logging_flow(self, capsys: pytest.CaptureFixture[str]) -> None:
        """configure → get_logger → log gera uma linha JSON com o correlation_id."""
        configure_logging(
            level="DEBUG",
            service_name="integration_test",
            correlation_id_getter=lambda: "int-test-001",
        )
        get_logger("integration.test").info("lark_event", extra={"account_id": "a1"})

        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["service"] == "integration_test"
        assert payload["correlation_id"] == "int-test-001"
        assert payload["account_id"] == "a1"
