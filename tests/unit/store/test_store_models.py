"""Unit tests for secret value objects, store ports and fakes."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest

from secret_config.errors import AuthError, SecretNotFoundError, SecretTransientError
from secret_config.store import (
    AccessToken,
    CredentialProvider,
    Secret,
    SecretProperties,
    SecretStoreClient,
)
from secret_config.testing import FakeCredentialProvider, FakeSecretStoreClient


async def _list(client: FakeSecretStoreClient) -> list[SecretProperties]:
    return [p async for p in client.list_secrets()]


# ---------------------------------------------------------------------------
# Secret / SecretProperties
# ---------------------------------------------------------------------------


class TestSecret:
    def test_is_frozen(self) -> None:
        secret = Secret(name="A", value="1", version="v1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            secret.value = "2"  # type: ignore[misc]

    def test_tags_are_read_only(self) -> None:
        tags = {"env": "prod"}
        secret = Secret(name="A", value="1", version="v1", tags=tags)
        tags["env"] = "dev"
        assert secret.tags["env"] == "prod"
        with pytest.raises(TypeError):
            secret.tags["env"] = "dev"  # type: ignore[index]

    def test_value_not_in_repr_or_dict(self) -> None:
        secret = Secret(name="Db--Password", value="hunter2", version="v1")
        assert "hunter2" not in repr(secret)
        assert "hunter2" not in str(secret.to_dict())

    def test_properties(self) -> None:
        secret = Secret(name="A", value="1", version="v9", content_type="text/plain", tags={"t": "x"})
        assert secret.properties == SecretProperties(
            name="A", version="v9", content_type="text/plain", tags={"t": "x"}
        )

    def test_hashable(self) -> None:
        assert len({Secret(name="A", value="1", version="v1"), Secret(name="A", value="1", version="v1")}) == 1


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


class TestPorts:
    def test_fake_client_satisfies_protocol(self) -> None:
        assert isinstance(FakeSecretStoreClient(), SecretStoreClient)

    def test_fake_credential_provider_satisfies_protocol(self) -> None:
        assert isinstance(FakeCredentialProvider(), CredentialProvider)

    def test_credential_provider_returns_token(self) -> None:
        provider = FakeCredentialProvider("abc")
        token = asyncio.run(provider.acquire_token("https://vault/.default"))
        assert isinstance(token, AccessToken)
        assert token.token == "abc"
        assert "abc" not in repr(token)
        assert provider.scopes == ["https://vault/.default"]

    def test_credential_provider_failure(self) -> None:
        with pytest.raises(AuthError):
            asyncio.run(FakeCredentialProvider(fail=True).acquire_token("scope"))


# ---------------------------------------------------------------------------
# FakeSecretStoreClient
# ---------------------------------------------------------------------------


class TestFakeSecretStoreClient:
    def test_lists_in_seed_order(self) -> None:
        client = FakeSecretStoreClient(page_size=1).seed("B", "2").seed("A", "1")
        assert [p.name for p in asyncio.run(_list(client))] == ["B", "A"]

    def test_reseed_bumps_version(self) -> None:
        client = FakeSecretStoreClient().seed("A", "1")
        first = asyncio.run(client.get_secret("A")).version
        client.seed("A", "2")
        second = asyncio.run(client.get_secret("A"))
        assert second.version != first
        assert second.value == "2"

    def test_explicit_version(self) -> None:
        client = FakeSecretStoreClient().seed("A", "1", version="abc")
        assert asyncio.run(client.get_secret("A")).version == "abc"

    def test_unknown_secret_raises_not_found(self) -> None:
        with pytest.raises(SecretNotFoundError):
            asyncio.run(FakeSecretStoreClient().get_secret("nope"))

    def test_remove(self) -> None:
        client = FakeSecretStoreClient().seed("A", "1")
        client.remove("A")
        assert asyncio.run(_list(client)) == []

    def test_fail_next_get_is_consumed(self) -> None:
        client = FakeSecretStoreClient().seed("A", "1")
        client.fail_next_get("A", SecretTransientError("blip"))
        with pytest.raises(SecretTransientError):
            asyncio.run(client.get_secret("A"))
        assert asyncio.run(client.get_secret("A")).value == "1"
        assert client.get_calls == ["A", "A"]
