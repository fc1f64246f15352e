"""Snapshot – immutable configuration view and its builder."""
from secret_config.snapshot.snapshot import EMPTY_SOURCE_VERSION, Snapshot
from secret_config.snapshot.builder import SnapshotBuilder, build_snapshot, compute_source_version

__all__ = [
    "EMPTY_SOURCE_VERSION",
    "Snapshot",
    "SnapshotBuilder",
    "build_snapshot",
    "compute_source_version",
]
