"""Secret store – SecretStoreClient and CredentialProvider ports."""
from __future__ import annotations

import dataclasses
from collections.abc import AsyncIterator
from datetime import datetime
from typing import Protocol, runtime_checkable

from secret_config.store.models import Secret, SecretProperties


@dataclasses.dataclass(frozen=True)
class AccessToken:
    """Opaque bearer token handed out by a :class:`CredentialProvider`."""

    token: str = dataclasses.field(repr=False)
    expires_on: datetime | None = None


@runtime_checkable
class CredentialProvider(Protocol):
    """Port: authenticate against the remote store.

    Only store client implementations call this; the engine never does.
    Implementations raise :class:`~secret_config.errors.AuthError` on failure.
    """

    async def acquire_token(self, scope: str) -> AccessToken: ...


@runtime_checkable
class SecretStoreClient(Protocol):
    """Port: list and fetch secrets from the remote store.

    ``list_secrets`` handles pagination itself and restarts from the first
    page on every call. ``get_secret`` raises one of the
    :class:`~secret_config.errors.SecretStoreError` subclasses on failure.
    """

    def list_secrets(self) -> AsyncIterator[SecretProperties]: ...

    async def get_secret(self, name: str) -> Secret: ...


__all__ = ["AccessToken", "CredentialProvider", "SecretStoreClient"]
