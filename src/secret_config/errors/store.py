"""Secret store errors – failures raised by store clients and credential providers."""

from __future__ import annotations

from typing import Any

from secret_config.errors.base import SecretConfigError


class SecretStoreError(SecretConfigError):
    """Unclassified failure talking to the remote secret store."""

    default_code = "secret_store_error"

    def __init__(
        self,
        message: str,
        *,
        secret_name: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.secret_name = secret_name
        if secret_name is not None:
            self.detail.setdefault("secret_name", secret_name)


class SecretNotFoundError(SecretStoreError):
    """The named secret does not exist (or was deleted after listing)."""

    default_code = "secret_not_found"


class SecretUnauthorizedError(SecretStoreError):
    """The credential was rejected or lacks access to the secret."""

    default_code = "secret_unauthorized"


class SecretThrottledError(SecretStoreError):
    """The store rejected the request because of rate limiting."""

    default_code = "secret_throttled"
    retryable = True

    def __init__(
        self,
        message: str = "Secret store throttled the request",
        *,
        retry_after_seconds: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after_seconds = retry_after_seconds


class SecretTransientError(SecretStoreError):
    """Network hiccup or 5xx from the store; expected to heal on retry."""

    default_code = "secret_transient"
    retryable = True


class AuthError(SecretConfigError):
    """The credential provider could not acquire a token."""

    default_code = "auth_error"

    def __init__(self, message: str, *, scope: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.scope = scope


#: Store errors worth retrying inside a single reload attempt.
RETRYABLE_STORE_ERRORS: tuple[type[SecretStoreError], ...] = (
    SecretThrottledError,
    SecretTransientError,
)

__all__ = [
    "RETRYABLE_STORE_ERRORS",
    "AuthError",
    "SecretNotFoundError",
    "SecretStoreError",
    "SecretThrottledError",
    "SecretTransientError",
    "SecretUnauthorizedError",
]
