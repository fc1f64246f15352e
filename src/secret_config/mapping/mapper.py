"""Mapping – secret name to configuration key policies."""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import NamedTuple, Protocol, runtime_checkable

from secret_config.errors import ConfigurationError
from secret_config.mapping.key import KEY_DELIMITER, ConfigurationKey
from secret_config.store.models import SecretProperties

DEFAULT_SEPARATOR = "--"


class KeyMapping(NamedTuple):
    """Outcome of mapping one secret: its key and whether to load it."""

    key: ConfigurationKey
    load: bool


@runtime_checkable
class MappingPolicy(Protocol):
    """Port: decide the configuration key and inclusion of each secret.

    Implementations must be pure and deterministic.
    """

    def map(self, secret_name: str, properties: SecretProperties) -> KeyMapping: ...


MappingFunction = Callable[[str, SecretProperties], "KeyMapping | tuple[str, bool]"]


class DefaultKeyMapper:
    """Replace ``--`` with ``:`` and load every enabled secret.

    Secrets whose content type appears in *excluded_content_types* are
    skipped (comparison is case-insensitive).
    """

    def __init__(
        self,
        separator: str = DEFAULT_SEPARATOR,
        excluded_content_types: Iterable[str] = (),
    ) -> None:
        if not separator:
            raise ConfigurationError("separator must be a non-empty string")
        self._separator = separator
        self._excluded = frozenset(ct.casefold() for ct in excluded_content_types)

    def map(self, secret_name: str, properties: SecretProperties) -> KeyMapping:
        key = ConfigurationKey(secret_name.replace(self._separator, KEY_DELIMITER))
        return KeyMapping(key, self._should_load(properties))

    def _should_load(self, properties: SecretProperties) -> bool:
        if not properties.enabled:
            return False
        if properties.content_type is None:
            return True
        return properties.content_type.casefold() not in self._excluded

    def __repr__(self) -> str:
        return f"DefaultKeyMapper(separator={self._separator!r})"


class PrefixKeyMapper:
    """Load only secrets named ``<prefix><separator>...``.

    The prefix is stripped before the remaining name is handed to *inner*
    (a :class:`DefaultKeyMapper` unless given), so ``Orders--Db--Password``
    with prefix ``Orders`` becomes ``Db:Password``. Matching is
    case-insensitive.
    """

    def __init__(
        self,
        prefix: str,
        *,
        separator: str = DEFAULT_SEPARATOR,
        strip_prefix: bool = True,
        inner: MappingPolicy | None = None,
    ) -> None:
        if not prefix:
            raise ConfigurationError("prefix must be a non-empty string")
        self._prefix = prefix + separator
        self._strip = strip_prefix
        self._inner = inner or DefaultKeyMapper(separator=separator)

    def map(self, secret_name: str, properties: SecretProperties) -> KeyMapping:
        matches = secret_name.casefold().startswith(self._prefix.casefold())
        name = secret_name[len(self._prefix):] if matches and self._strip else secret_name
        mapping = self._inner.map(name, properties)
        return KeyMapping(mapping.key, mapping.load and matches)

    def __repr__(self) -> str:
        return f"PrefixKeyMapper(prefix={self._prefix!r})"


def resolve_mapper(
    policy: MappingPolicy | MappingFunction | None,
) -> Callable[[str, SecretProperties], KeyMapping]:
    """Normalise a policy object or a plain function into one callable.

    Raises :class:`ConfigurationError` when *policy* is neither.
    """
    if policy is None:
        policy = DefaultKeyMapper()
    if isinstance(policy, MappingPolicy):
        target = policy.map
    elif callable(policy):
        target = policy
    else:
        raise ConfigurationError(
            f"mapper must provide map(name, properties) or be callable, got {type(policy).__name__}"
        )

    def _map(secret_name: str, properties: SecretProperties) -> KeyMapping:
        key, load = target(secret_name, properties)
        return KeyMapping(ConfigurationKey(key), bool(load))

    return _map


__all__ = [
    "DEFAULT_SEPARATOR",
    "DefaultKeyMapper",
    "KeyMapping",
    "MappingFunction",
    "MappingPolicy",
    "PrefixKeyMapper",
    "resolve_mapper",
]
