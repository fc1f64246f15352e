"""Secret store – Secret and SecretProperties value objects."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


def _freeze(tags: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(tags or {}))


@dataclasses.dataclass(frozen=True)
class SecretProperties:
    """Metadata of a secret as returned by a listing, before its value is fetched."""

    name: str
    version: str
    enabled: bool = True
    content_type: str | None = None
    tags: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _freeze(self.tags))

    def __hash__(self) -> int:
        return hash((self.name, self.version))


@dataclasses.dataclass(frozen=True)
class Secret:
    """A fetched secret. Immutable once fetched."""

    name: str
    value: str = dataclasses.field(repr=False)
    version: str
    enabled: bool = True
    content_type: str | None = None
    tags: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _freeze(self.tags))

    def __hash__(self) -> int:
        return hash((self.name, self.version))

    @property
    def properties(self) -> SecretProperties:
        return SecretProperties(
            name=self.name,
            version=self.version,
            enabled=self.enabled,
            content_type=self.content_type,
            tags=self.tags,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise without the value (safe for logging)."""
        return {
            "name": self.name,
            "version": self.version,
            "enabled": self.enabled,
            "content_type": self.content_type,
            "tags": dict(self.tags),
        }


__all__ = ["Secret", "SecretProperties"]
