"""Unit tests for logging helpers."""

from __future__ import annotations

import logging

import structlog

from secret_config.observability import (
    REDACTED,
    SecretValueRedactor,
    configure_logging,
    get_logger,
)


class TestSecretValueRedactor:
    def test_redacts_default_fields(self) -> None:
        event = SecretValueRedactor()(None, "info", {"event": "loaded", "value": "hunter2", "key": "Db"})
        assert event == {"event": "loaded", "value": REDACTED, "key": "Db"}

    def test_redacts_nested_and_case_insensitive(self) -> None:
        redactor = SecretValueRedactor()
        event = redactor.redact({"secret": {"Token": "abc", "name": "Db"}})
        assert event == {"secret": REDACTED}
        assert redactor.redact({"meta": {"Token": "abc"}}) == {"meta": {"Token": REDACTED}}

    def test_custom_fields(self) -> None:
        redactor = SecretValueRedactor(frozenset({"pin"}))
        assert redactor.redact({"pin": "1234", "value": "kept"}) == {"pin": REDACTED, "value": "kept"}


class TestLoggingSetup:
    def test_get_logger_binds_initial_values(self) -> None:
        logger = get_logger("secret_config.test", engine="orders")
        assert logger is not None
        assert hasattr(logger, "info")

    def test_configure_logging_installs_single_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            configure_logging(logging.DEBUG, json=False)
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            structlog.reset_defaults()
