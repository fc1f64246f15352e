"""Reload – SecretLoader: list, filter and fetch secrets from the store."""
from __future__ import annotations

import asyncio
from collections.abc import Callable

from secret_config.errors import SecretNotFoundError
from secret_config.mapping import KeyMapping
from secret_config.observability import get_logger
from secret_config.reload.retry import FetchRetryPolicy
from secret_config.store import Secret, SecretProperties, SecretStoreClient

logger = get_logger(__name__)


class SecretLoader:
    """Materialise the loadable secrets of a store in listing order.

    Disabled secrets and secrets the mapper rejects are skipped before their
    value is fetched. Values are fetched with bounded concurrency, and a
    secret whose listed version matches the one from the previous successful
    load is served from cache instead of the network. The cache is replaced
    only after a load completes, so a failed load leaves it untouched.
    """

    def __init__(
        self,
        client: SecretStoreClient,
        mapper: Callable[[str, SecretProperties], KeyMapping],
        *,
        max_concurrency: int = 32,
        retry: FetchRetryPolicy | None = None,
    ) -> None:
        self._client = client
        self._map = mapper
        self._max_concurrency = max_concurrency
        self._retry = retry or FetchRetryPolicy()
        self._cache: dict[str, Secret] = {}
        self._last_fetch_count = 0

    @property
    def last_fetch_count(self) -> int:
        """Number of ``get_secret`` calls issued by the last completed load."""
        return self._last_fetch_count

    async def _list_loadable(self) -> list[SecretProperties]:
        loadable: list[SecretProperties] = []
        async for properties in self._client.list_secrets():
            if not properties.enabled:
                continue
            if not self._map(properties.name, properties).load:
                continue
            loadable.append(properties)
        return loadable

    async def load(self) -> list[Secret]:
        listed = await self._list_loadable()
        semaphore = asyncio.Semaphore(self._max_concurrency)
        fetches = 0

        async def _fetch(properties: SecretProperties) -> Secret | None:
            nonlocal fetches
            cached = self._cache.get(properties.name)
            if cached is not None and cached.version == properties.version:
                return cached
            async with semaphore:
                fetches += 1
                try:
                    return await self._retry.execute_async(
                        lambda: self._client.get_secret(properties.name)
                    )
                except SecretNotFoundError:
                    logger.info("secret_config.secret_vanished", secret=properties.name)
                    return None

        tasks = [asyncio.ensure_future(_fetch(p)) for p in listed]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        secrets = [s for s in results if s is not None]
        self._cache = {s.name: s for s in secrets}
        self._last_fetch_count = fetches
        logger.debug(
            "secret_config.secrets_loaded",
            listed=len(listed),
            loaded=len(secrets),
            fetched=fetches,
        )
        return secrets

    def clear_cache(self) -> None:
        self._cache.clear()


__all__ = ["SecretLoader"]
