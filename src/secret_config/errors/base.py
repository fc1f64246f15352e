"""Root error class for the secret-config error hierarchy."""

from __future__ import annotations

import json
from typing import Any, ClassVar


class SecretConfigError(Exception):
    """Root of the error hierarchy.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to the class ``default_code``).
        detail: Arbitrary extra context (serialisable dict).
        cause: Original exception that triggered this error.

    ``retryable`` marks failures expected to heal on a later attempt (the
    next fetch or the next reload tick). Store clients and the engine never
    put secret values into ``detail``, so :meth:`log_fields` is safe to bind
    onto a logger.
    """

    default_code: str = "secret_config_error"
    retryable: ClassVar[bool] = False

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return a JSON-serialisable single-line string representation."""
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (safe for logging)."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def log_fields(self) -> dict[str, Any]:
        """Structured logging context for this error."""
        fields: dict[str, Any] = {"error_code": self.code, "retryable": self.retryable}
        if self.detail:
            fields["error_detail"] = self.detail
        return fields


def error_log_fields(exc: BaseException | None) -> dict[str, Any]:
    """:meth:`SecretConfigError.log_fields` for *exc*, or ``{}`` for foreign errors."""
    if isinstance(exc, SecretConfigError):
        return exc.log_fields()
    return {}


__all__ = ["SecretConfigError", "error_log_fields"]
