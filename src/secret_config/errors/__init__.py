"""Error hierarchy – public re-export surface.

Hierarchy::

    SecretConfigError
    ├── ConfigurationError           (load.py)
    │   ├── MissingRequiredSettingError
    │   └── InvalidSettingValueError
    ├── FatalLoadError
    ├── EngineStateError
    ├── TransientReloadError
    ├── MappingCollisionWarning      (recorded, never raised)
    ├── AuthError                    (store.py)
    └── SecretStoreError
        ├── SecretNotFoundError
        ├── SecretUnauthorizedError
        ├── SecretThrottledError
        └── SecretTransientError
"""

from secret_config.errors.base import SecretConfigError, error_log_fields
from secret_config.errors.load import (
    ConfigurationError,
    EngineStateError,
    FatalLoadError,
    InvalidSettingValueError,
    MappingCollisionWarning,
    MissingRequiredSettingError,
    TransientReloadError,
)
from secret_config.errors.store import (
    RETRYABLE_STORE_ERRORS,
    AuthError,
    SecretNotFoundError,
    SecretStoreError,
    SecretThrottledError,
    SecretTransientError,
    SecretUnauthorizedError,
)

__all__ = [
    "RETRYABLE_STORE_ERRORS",
    "AuthError",
    "ConfigurationError",
    "EngineStateError",
    "FatalLoadError",
    "InvalidSettingValueError",
    "MappingCollisionWarning",
    "MissingRequiredSettingError",
    "SecretConfigError",
    "SecretNotFoundError",
    "SecretStoreError",
    "SecretThrottledError",
    "SecretTransientError",
    "SecretUnauthorizedError",
    "TransientReloadError",
    "error_log_fields",
]
