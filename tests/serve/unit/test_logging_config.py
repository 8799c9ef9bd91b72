"""Unit tests for phonegap_serve.core.logging_config."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

import pytest

from phonegap_serve.api.middleware.request_id import request_id_var
from phonegap_serve.core.logging_config import (
    SERVE_LOGGERS,
    RequestIdFilter,
    configure_serve_logging,
    get_logging_status,
    reset_logging_to_debug,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def restore_root_logger(monkeypatch: pytest.MonkeyPatch) -> Generator[None, Any, None]:
    monkeypatch.delenv("PHONEGAP_SERVE_DEBUG", raising=False)
    monkeypatch.delenv("PHONEGAP_SERVE_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    filters = {handler: list(handler.filters) for handler in handlers}
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler, original in filters.items():
        handler.filters[:] = original
    root.setLevel(level)
    for name in ("aiohttp.access", "aiohttp.server", "asyncio"):
        logging.getLogger(name).setLevel(logging.NOTSET)


class TestConfigureServeLogging:
    """Tests for configure_serve_logging."""

    def test_configure_when_default_then_info_and_third_party_quiet(self) -> None:
        configure_serve_logging()

        assert logging.getLogger().level == logging.INFO
        for name in SERVE_LOGGERS:
            assert logging.getLogger(name).level == logging.INFO
        assert logging.getLogger("aiohttp.access").level == logging.WARNING
        assert logging.getLogger("asyncio").level == logging.WARNING
        assert logging.getLogger("aiohttp.web").level == logging.INFO

    def test_configure_when_debug_mode_then_serve_loggers_debug(self) -> None:
        configure_serve_logging(debug_mode=True)

        assert logging.getLogger("phonegap_serve.api.server").level == logging.DEBUG
        assert logging.getLogger("aiohttp.server").level == logging.WARNING

    def test_configure_when_env_debug_then_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PHONEGAP_SERVE_DEBUG", "true")

        configure_serve_logging(debug_mode=False)

        assert logging.getLogger("phonegap_serve").level == logging.DEBUG

    def test_configure_when_force_debug_false_then_env_ignored(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PHONEGAP_SERVE_DEBUG", "1")

        configure_serve_logging(debug_mode=True, force_debug=False)

        assert logging.getLogger("phonegap_serve").level == logging.INFO

    def test_configure_when_log_level_env_then_root_overridden(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PHONEGAP_SERVE_LOG_LEVEL", "warning")

        configure_serve_logging()

        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("phonegap_serve").level == logging.INFO

    def test_configure_when_called_twice_then_single_request_id_filter(self) -> None:
        configure_serve_logging()
        configure_serve_logging()

        for handler in logging.getLogger().handlers:
            assert sum(isinstance(f, RequestIdFilter) for f in handler.filters) == 1


class TestRequestIdFilter:
    """Tests for RequestIdFilter."""

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("phonegap_serve", logging.INFO, __file__, 1, "msg", None, None)

    def test_filter_when_outside_request_then_placeholder(self) -> None:
        record = self._record()

        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "no-request-id"  # type: ignore[attr-defined]

    def test_filter_when_inside_request_then_current_id(self) -> None:
        record = self._record()
        token = request_id_var.set("abc-123")
        try:
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)

        assert record.request_id == "abc-123"  # type: ignore[attr-defined]


def test_reset_logging_to_debug_when_called_then_suppressed_loggers_debug() -> None:
    configure_serve_logging()

    reset_logging_to_debug()

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("aiohttp.access").level == logging.DEBUG


def test_get_logging_status_when_configured_then_reports_levels() -> None:
    configure_serve_logging()

    status = get_logging_status()

    assert status["root"] == "INFO"
    assert status["phonegap_serve"] == "INFO"
    assert status["aiohttp.access"] == "WARNING"
    assert set(status) == {"root", "phonegap_serve", "aiohttp.access", "aiohttp.server", "asyncio"}
