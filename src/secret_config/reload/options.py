"""Reload – ReloadOptions settings dataclass."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from secret_config.errors import InvalidSettingValueError
from secret_config.settings import Settings

DEFAULT_RELOAD_INTERVAL = 300.0
DEFAULT_MAX_CONCURRENCY = 32


@dataclasses.dataclass
class ReloadOptions(Settings):
    """Tuning knobs of the reload engine.

    Loadable from the environment with
    ``EnvSettingsLoader().load(ReloadOptions)`` (``SECRET_CONFIG_*``).

    Attributes
    ----------
    reload_interval:
        Seconds between background reloads; ``None`` disables them.
    tolerate_initial_failure:
        Start with an empty snapshot instead of raising
        :class:`~secret_config.errors.FatalLoadError`.
    max_concurrency:
        Upper bound on concurrent ``get_secret`` calls during one load.
    fetch_retry_attempts:
        Attempts per ``get_secret`` call for throttled / transient errors
        within one reload. ``1`` disables retrying.
    fetch_retry_max_wait:
        Cap, in seconds, on the exponential wait between those attempts.
    """

    _prefix: ClassVar[str] = "SECRET_CONFIG"

    reload_interval: float | None = DEFAULT_RELOAD_INTERVAL
    tolerate_initial_failure: bool = False
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    fetch_retry_attempts: int = 1
    fetch_retry_max_wait: float = 2.0

    def _validate(self) -> None:
        if self.reload_interval is not None and self.reload_interval <= 0:
            raise InvalidSettingValueError("reload_interval", self.reload_interval, "must be positive")
        if self.max_concurrency < 1:
            raise InvalidSettingValueError("max_concurrency", self.max_concurrency, "must be at least 1")
        if self.fetch_retry_attempts < 1:
            raise InvalidSettingValueError(
                "fetch_retry_attempts", self.fetch_retry_attempts, "must be at least 1"
            )
        if self.fetch_retry_max_wait < 0:
            raise InvalidSettingValueError(
                "fetch_retry_max_wait", self.fetch_retry_max_wait, "must not be negative"
            )


__all__ = ["DEFAULT_MAX_CONCURRENCY", "DEFAULT_RELOAD_INTERVAL", "ReloadOptions"]
