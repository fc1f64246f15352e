"""Settings – environment-loadable settings dataclasses."""
from secret_config.settings.base import Settings
from secret_config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EnvSettingsLoader", "Settings", "SettingsLoader"]
