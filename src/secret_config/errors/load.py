"""Load errors – configuration, fatal initial load, transient reload, collisions."""

from __future__ import annotations

from typing import Any

from secret_config.errors.base import SecretConfigError


class ConfigurationError(SecretConfigError):
    """Invalid user-supplied options; raised before any load is attempted."""

    default_code = "configuration_error"


class MissingRequiredSettingError(ConfigurationError):
    """A required environment variable / setting is absent."""

    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Required setting '{setting_name}' is missing")
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigurationError):
    """A setting's value is present but semantically invalid."""

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}"
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


class FatalLoadError(SecretConfigError):
    """The initial load failed; no configuration snapshot is available."""

    default_code = "fatal_load_error"


class EngineStateError(SecretConfigError):
    """Operation not valid in the engine's current lifecycle phase."""

    default_code = "engine_state_error"


class TransientReloadError(SecretConfigError):
    """A background reload failed; the previous snapshot stays active."""

    default_code = "transient_reload_error"
    retryable = True

    def __init__(self, message: str, *, attempt: int = 1, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.attempt = attempt


class MappingCollisionWarning(SecretConfigError):
    """Two secrets mapped to the same configuration key.

    Recorded on the snapshot and in the engine diagnostics, never raised.
    The secret enumerated last (``winner``) provides the value.
    """

    default_code = "mapping_collision"

    def __init__(self, key: str, *, overridden: str, winner: str) -> None:
        super().__init__(
            f"Secrets '{overridden}' and '{winner}' both map to '{key}'; '{winner}' wins",
            detail={"key": key, "overridden": overridden, "winner": winner},
        )
        self.key = key
        self.overridden = overridden
        self.winner = winner

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingCollisionWarning):
            return NotImplemented
        return (self.key, self.overridden, self.winner) == (other.key, other.overridden, other.winner)

    def __hash__(self) -> int:
        return hash((self.key, self.overridden, self.winner))


__all__ = [
    "ConfigurationError",
    "EngineStateError",
    "FatalLoadError",
    "InvalidSettingValueError",
    "MappingCollisionWarning",
    "MissingRequiredSettingError",
    "TransientReloadError",
]
