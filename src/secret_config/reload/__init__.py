"""Reload – engine, options, loader and diagnostic state."""
from secret_config.reload.options import DEFAULT_MAX_CONCURRENCY, DEFAULT_RELOAD_INTERVAL, ReloadOptions
from secret_config.reload.state import ErrorInfo, ReloadPhase, ReloadResult, ReloadState
from secret_config.reload.retry import FetchRetryPolicy
from secret_config.reload.loader import SecretLoader
from secret_config.reload.engine import ErrorCallback, ReloadEngine, SecretConfigurationProvider

__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_RELOAD_INTERVAL",
    "ErrorCallback",
    "ErrorInfo",
    "FetchRetryPolicy",
    "ReloadEngine",
    "ReloadOptions",
    "ReloadPhase",
    "ReloadResult",
    "ReloadState",
    "SecretConfigurationProvider",
    "SecretLoader",
]
