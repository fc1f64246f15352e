"""Mapping – configuration keys and secret name mapping policies."""
from secret_config.mapping.key import (
    KEY_DELIMITER,
    ConfigurationKey,
    child_segment,
    combine,
    is_under,
    normalize,
    split,
)
from secret_config.mapping.mapper import (
    DEFAULT_SEPARATOR,
    DefaultKeyMapper,
    KeyMapping,
    MappingFunction,
    MappingPolicy,
    PrefixKeyMapper,
    resolve_mapper,
)

__all__ = [
    "DEFAULT_SEPARATOR",
    "KEY_DELIMITER",
    "ConfigurationKey",
    "DefaultKeyMapper",
    "KeyMapping",
    "MappingFunction",
    "MappingPolicy",
    "PrefixKeyMapper",
    "child_segment",
    "combine",
    "is_under",
    "normalize",
    "resolve_mapper",
    "split",
]
