"""Snapshot – immutable point-in-time view of mapped configuration."""
from __future__ import annotations

from collections.abc import Iterator, KeysView, Mapping
from datetime import datetime
from types import MappingProxyType

from secret_config.errors import MappingCollisionWarning
from secret_config.mapping.key import ConfigurationKey, child_segment, is_under, normalize

EMPTY_SOURCE_VERSION = "empty"


class Snapshot(Mapping[str, str]):
    """Read-only mapping of configuration key to value.

    Lookups are case-insensitive. Instances are never mutated after
    construction; the engine replaces them wholesale, so a reader holding a
    reference always sees one consistent set of values.
    """

    __slots__ = ("_collisions", "_entries", "_loaded_at", "_source_version")

    def __init__(
        self,
        values: Mapping[ConfigurationKey, str],
        *,
        loaded_at: datetime,
        source_version: str,
        collisions: tuple[MappingCollisionWarning, ...] = (),
    ) -> None:
        entries = {normalize(key): (key, value) for key, value in values.items()}
        self._entries: Mapping[str, tuple[ConfigurationKey, str]] = MappingProxyType(entries)
        self._loaded_at = loaded_at
        self._source_version = source_version
        self._collisions = tuple(collisions)

    @classmethod
    def empty(cls, loaded_at: datetime) -> Snapshot:
        return cls({}, loaded_at=loaded_at, source_version=EMPTY_SOURCE_VERSION)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def loaded_at(self) -> datetime:
        return self._loaded_at

    @property
    def source_version(self) -> str:
        """Digest over the ``(name, version)`` pairs the snapshot was built from."""
        return self._source_version

    @property
    def collisions(self) -> tuple[MappingCollisionWarning, ...]:
        return self._collisions

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> str:
        return self._entries[normalize(key)][1]

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize(key) in self._entries

    def __repr__(self) -> str:
        return (
            f"Snapshot(entries={len(self)}, source_version={self._source_version[:12]!r}, "
            f"loaded_at={self._loaded_at.isoformat()})"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def keys(self, prefix: str | None = None) -> KeysView[str] | frozenset[ConfigurationKey]:  # type: ignore[override]
        """Mapping key view, or the keys under *prefix* when one is given."""
        if prefix is None:
            return super().keys()
        return self.keys_under(prefix)

    def keys_under(self, prefix: str | None = None) -> frozenset[ConfigurationKey]:
        """Keys equal to *prefix* or nested below it; all keys when empty."""
        return frozenset(
            key for key, _ in self._entries.values() if is_under(key, prefix or "")
        )

    def children(self, prefix: str | None = None) -> frozenset[str]:
        """Distinct segment names directly below *prefix* (section binding)."""
        segments = (child_segment(key, prefix or "") for key, _ in self._entries.values())
        return frozenset(s for s in segments if s is not None)

    def as_dict(self) -> dict[str, str]:
        return dict(self._entries.values())


__all__ = ["EMPTY_SOURCE_VERSION", "Snapshot"]
