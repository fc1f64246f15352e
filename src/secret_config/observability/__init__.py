"""Observability – structured logging helpers."""
from secret_config.observability.logging import (
    DEFAULT_SENSITIVE_FIELDS,
    REDACTED,
    SecretValueRedactor,
    configure_logging,
    get_logger,
)

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "REDACTED",
    "SecretValueRedactor",
    "configure_logging",
    "get_logger",
]
