"""Snapshot – SnapshotBuilder and source version digest."""
from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable

from secret_config.clock import Clock, SystemClock
from secret_config.errors import MappingCollisionWarning
from secret_config.mapping import (
    ConfigurationKey,
    KeyMapping,
    MappingFunction,
    MappingPolicy,
    normalize,
    resolve_mapper,
)
from secret_config.observability import get_logger
from secret_config.snapshot.snapshot import EMPTY_SOURCE_VERSION, Snapshot
from secret_config.store.models import Secret, SecretProperties

logger = get_logger(__name__)


def compute_source_version(
    pairs: Iterable[tuple[str, str]],
    winners: Iterable[tuple[str, str]] = (),
) -> str:
    """Stable SHA-256 digest over ``(name, version)`` pairs.

    Order-independent: pairs are sorted before hashing. *winners* holds the
    ``(key, secret name)`` that won each collided key, so a change of winner
    changes the digest even when no version moved. An empty input yields
    :data:`EMPTY_SOURCE_VERSION`.
    """
    ordered = sorted(set(pairs))
    if not ordered:
        return EMPTY_SOURCE_VERSION
    digest = hashlib.sha256()
    for name, version in ordered:
        digest.update(name.encode("utf-8"))
        digest.update(b"\x00")
        digest.update(version.encode("utf-8"))
        digest.update(b"\x1e")
    for key, name in sorted(set(winners)):
        digest.update(b"\x1d")
        digest.update(key.encode("utf-8"))
        digest.update(b"\x00")
        digest.update(name.encode("utf-8"))
    return digest.hexdigest()


class SnapshotBuilder:
    """Turn a fully materialised sequence of secrets into a :class:`Snapshot`.

    Disabled secrets and secrets the mapper rejects are dropped. When two
    secrets map to the same key the later one wins and a
    :class:`MappingCollisionWarning` is attached to the snapshot.
    """

    def __init__(
        self,
        mapper: MappingPolicy | MappingFunction | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._map: Callable[[str, SecretProperties], KeyMapping] = resolve_mapper(mapper)
        self._clock = clock or SystemClock()

    def build(self, secrets: Iterable[Secret]) -> Snapshot:
        values: dict[str, tuple[ConfigurationKey, str, str]] = {}
        collisions: list[MappingCollisionWarning] = []
        collided: set[str] = set()
        sources: list[tuple[str, str]] = []

        for secret in secrets:
            if not secret.enabled:
                continue
            key, load = self._map(secret.name, secret.properties)
            if not load:
                continue
            slot = normalize(key)
            previous = values.get(slot)
            if previous is not None:
                collision = MappingCollisionWarning(key, overridden=previous[2], winner=secret.name)
                collisions.append(collision)
                collided.add(slot)
                logger.warning(
                    "secret_config.mapping_collision",
                    key=key,
                    overridden=previous[2],
                    winner=secret.name,
                )
            values[slot] = (key, secret.value, secret.name)
            sources.append((secret.name, secret.version))

        return Snapshot(
            {key: value for key, value, _ in values.values()},
            loaded_at=self._clock.now(),
            source_version=compute_source_version(
                sources,
                ((slot, values[slot][2]) for slot in collided),
            ),
            collisions=tuple(collisions),
        )


def build_snapshot(
    secrets: Iterable[Secret],
    mapper: MappingPolicy | MappingFunction | None = None,
    clock: Clock | None = None,
) -> Snapshot:
    """Shorthand for ``SnapshotBuilder(mapper, clock).build(secrets)``."""
    return SnapshotBuilder(mapper, clock).build(secrets)


__all__ = ["SnapshotBuilder", "build_snapshot", "compute_source_version"]
