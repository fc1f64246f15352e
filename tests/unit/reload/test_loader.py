"""Unit tests for SecretLoader and FetchRetryPolicy."""

from __future__ import annotations

import asyncio

import pytest

from secret_config.errors import (
    SecretThrottledError,
    SecretTransientError,
    SecretUnauthorizedError,
)
from secret_config.mapping import PrefixKeyMapper, resolve_mapper
from secret_config.reload import FetchRetryPolicy, SecretLoader
from secret_config.store import Secret
from secret_config.testing import FakeSecretStoreClient


def _loader(client: FakeSecretStoreClient, **kwargs: object) -> SecretLoader:
    return SecretLoader(client, resolve_mapper(None), **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# SecretLoader
# ---------------------------------------------------------------------------


class TestSecretLoader:
    def test_keeps_listing_order_across_pages(self) -> None:
        client = FakeSecretStoreClient(page_size=2)
        names = [f"Key{i}" for i in range(7)]
        for name in names:
            client.seed(name, name.lower())

        secrets = asyncio.run(_loader(client).load())
        assert [s.name for s in secrets] == names

    def test_skips_disabled_and_rejected_without_fetching(self) -> None:
        client = (
            FakeSecretStoreClient()
            .seed("Orders--A", "1")
            .seed("Orders--B", "2", enabled=False)
            .seed("Billing--C", "3")
        )
        loader = SecretLoader(client, resolve_mapper(PrefixKeyMapper("Orders")))
        secrets = asyncio.run(loader.load())
        assert [s.name for s in secrets] == ["Orders--A"]
        assert client.get_calls == ["Orders--A"]

    def test_reuses_cached_values_for_unchanged_versions(self) -> None:
        async def scenario() -> tuple[SecretLoader, FakeSecretStoreClient]:
            client = FakeSecretStoreClient().seed("A", "1").seed("B", "2")
            loader = _loader(client)
            await loader.load()
            assert loader.last_fetch_count == 2
            client.seed("B", "3")
            client.reset_counters()
            secrets = await loader.load()
            assert [s.value for s in secrets] == ["1", "3"]
            return loader, client

        loader, client = asyncio.run(scenario())
        assert client.get_calls == ["B"]
        assert loader.last_fetch_count == 1

    def test_failed_load_keeps_previous_cache(self) -> None:
        async def scenario() -> FakeSecretStoreClient:
            client = FakeSecretStoreClient().seed("A", "1").seed("B", "2")
            loader = _loader(client)
            await loader.load()
            client.seed("A", "10")
            client.fail_next_get("A", SecretUnauthorizedError("revoked"))
            with pytest.raises(SecretUnauthorizedError):
                await loader.load()
            client.reset_counters()
            await loader.load()
            return client

        client = asyncio.run(scenario())
        assert client.get_calls == ["A"]

    def test_concurrency_is_bounded(self) -> None:
        in_flight = 0
        peak = 0

        class SlowClient(FakeSecretStoreClient):
            async def get_secret(self, name: str) -> Secret:
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.001)
                in_flight -= 1
                return await super().get_secret(name)

        client = SlowClient()
        for i in range(20):
            client.seed(f"K{i}", str(i))
        secrets = asyncio.run(_loader(client, max_concurrency=3).load())
        assert len(secrets) == 20
        assert peak <= 3

    def test_listing_error_propagates(self) -> None:
        client = FakeSecretStoreClient().seed("A", "1")
        client.fail_listing(SecretTransientError("network"))
        with pytest.raises(SecretTransientError):
            asyncio.run(_loader(client).load())

    def test_clear_cache_forces_refetch(self) -> None:
        async def scenario() -> FakeSecretStoreClient:
            client = FakeSecretStoreClient().seed("A", "1")
            loader = _loader(client)
            await loader.load()
            loader.clear_cache()
            client.reset_counters()
            await loader.load()
            return client

        assert asyncio.run(scenario()).get_calls == ["A"]


# ---------------------------------------------------------------------------
# FetchRetryPolicy
# ---------------------------------------------------------------------------


class TestFetchRetryPolicy:
    def _flaky(self, failures: list[Exception]) -> tuple[list[int], object]:
        calls: list[int] = []

        async def op() -> str:
            calls.append(1)
            if failures:
                raise failures.pop(0)
            return "ok"

        return calls, op

    def test_single_attempt_by_default(self) -> None:
        calls, op = self._flaky([SecretThrottledError()])
        with pytest.raises(SecretThrottledError):
            asyncio.run(FetchRetryPolicy().execute_async(op))  # type: ignore[arg-type]
        assert len(calls) == 1

    def test_retries_throttled_and_transient(self) -> None:
        calls, op = self._flaky([SecretThrottledError(), SecretTransientError("blip")])
        policy = FetchRetryPolicy(max_attempts=3, max_wait=0)
        assert asyncio.run(policy.execute_async(op)) == "ok"  # type: ignore[arg-type]
        assert len(calls) == 3

    def test_does_not_retry_unauthorized(self) -> None:
        calls, op = self._flaky([SecretUnauthorizedError("denied")])
        policy = FetchRetryPolicy(max_attempts=5, max_wait=0)
        with pytest.raises(SecretUnauthorizedError):
            asyncio.run(policy.execute_async(op))  # type: ignore[arg-type]
        assert len(calls) == 1

    def test_reraises_last_error_when_exhausted(self) -> None:
        calls, op = self._flaky([SecretTransientError("1"), SecretTransientError("2")])
        policy = FetchRetryPolicy(max_attempts=2, max_wait=0)
        with pytest.raises(SecretTransientError) as info:
            asyncio.run(policy.execute_async(op))  # type: ignore[arg-type]
        assert info.value.message == "2"
        assert len(calls) == 2
