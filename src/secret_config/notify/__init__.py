"""Notify – change subscription for published snapshots."""
from secret_config.notify.notifier import ChangeHandler, ChangeNotifier, SnapshotChanged

__all__ = ["ChangeHandler", "ChangeNotifier", "SnapshotChanged"]
