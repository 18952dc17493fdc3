"""Tests for setup_logging — level and renderer selection."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog

from rollbar_notifier.core.config import LoggingConfig
from rollbar_notifier.core.logging import REDACTED, redact_secrets, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo global logging changes so later tests log normally."""
    root = logging.getLogger()
    client = logging.getLogger("aiohttp")
    handlers, level, client_level = list(root.handlers), root.level, client.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    client.setLevel(client_level)
    structlog.reset_defaults()


def _renderer() -> object:
    handler = logging.getLogger().handlers[0]
    formatter = handler.formatter
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
    return formatter.processors[-1]


class TestSetupLogging:
    def test_defaults_to_info_json(self) -> None:
        setup_logging()
        assert logging.getLogger().level == logging.INFO
        assert isinstance(_renderer(), structlog.processors.JSONRenderer)

    def test_config_values_used(self) -> None:
        setup_logging(config=LoggingConfig(level="DEBUG", format="console"))
        assert logging.getLogger().level == logging.DEBUG
        assert isinstance(_renderer(), structlog.dev.ConsoleRenderer)

    def test_overrides_win_over_config(self) -> None:
        setup_logging(
            level="warning",
            fmt="json",
            config=LoggingConfig(level="DEBUG", format="console"),
        )
        assert logging.getLogger().level == logging.WARNING
        assert isinstance(_renderer(), structlog.processors.JSONRenderer)

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_single_handler_installed(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_http_client_logger_kept_quiet(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger("aiohttp").level == logging.WARNING

    def test_http_client_logger_follows_higher_level(self) -> None:
        setup_logging(level="ERROR")
        assert logging.getLogger("aiohttp").level == logging.ERROR

    def test_stdlib_records_share_renderer(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO", fmt="json")
        logging.getLogger("some.library").warning("plain stdlib record")
        err = capsys.readouterr().err
        assert '"event": "plain stdlib record"' in err
        assert '"level": "warning"' in err


# ── Secret redaction ────────────────────────────────────────────


class TestRedactSecrets:
    def test_token_keys_masked(self) -> None:
        event = {"event": "x", "access_token": "tok-123", "token": "t", "uuid": "u"}
        out = redact_secrets(None, "info", event)
        assert out["access_token"] == REDACTED
        assert out["token"] == REDACTED
        assert out["uuid"] == "u"

    def test_configured_pipeline_masks_token(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        setup_logging(level="INFO", fmt="json")
        structlog.get_logger("rollbar_notifier.test").info("leak_check", access_token="tok-123")
        err = capsys.readouterr().err
        assert "tok-123" not in err
        assert REDACTED in err
