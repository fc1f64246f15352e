"""
secret_config – secrets from a remote store as live, hierarchical configuration.

Import path convention::

    from secret_config import ReloadEngine, ReloadOptions
    from secret_config.mapping import PrefixKeyMapper
    from secret_config.errors import FatalLoadError
    from secret_config.testing import FakeSecretStoreClient
"""

from secret_config.errors import (
    ConfigurationError,
    FatalLoadError,
    MappingCollisionWarning,
    SecretConfigError,
    TransientReloadError,
)
from secret_config.mapping import DefaultKeyMapper, KeyMapping, MappingPolicy, PrefixKeyMapper
from secret_config.notify import ChangeNotifier, SnapshotChanged
from secret_config.reload import (
    ErrorInfo,
    ReloadEngine,
    ReloadOptions,
    ReloadPhase,
    ReloadResult,
    ReloadState,
    SecretConfigurationProvider,
)
from secret_config.snapshot import Snapshot, SnapshotBuilder, build_snapshot
from secret_config.store import Secret, SecretProperties, SecretStoreClient

__version__ = "0.1.0"
__all__ = [
    "ChangeNotifier",
    "ConfigurationError",
    "DefaultKeyMapper",
    "ErrorInfo",
    "FatalLoadError",
    "KeyMapping",
    "MappingCollisionWarning",
    "MappingPolicy",
    "PrefixKeyMapper",
    "ReloadEngine",
    "ReloadOptions",
    "ReloadPhase",
    "ReloadResult",
    "ReloadState",
    "Secret",
    "SecretConfigError",
    "SecretConfigurationProvider",
    "SecretProperties",
    "SecretStoreClient",
    "Snapshot",
    "SnapshotBuilder",
    "SnapshotChanged",
    "TransientReloadError",
    "__version__",
    "build_snapshot",
]
