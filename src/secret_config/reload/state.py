"""Reload – lifecycle phases, outcomes and diagnostic state."""
from __future__ import annotations

import dataclasses
import enum
from datetime import datetime
from typing import Any

from secret_config.errors import MappingCollisionWarning, SecretConfigError
from secret_config.snapshot import Snapshot


class ReloadPhase(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    RELOADING = "reloading"
    STOPPED = "stopped"


class ReloadResult(enum.Enum):
    """Outcome of one reload attempt."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class ErrorInfo:
    """Details of a failed load handed to the error callback."""

    error: SecretConfigError
    occurred_at: datetime
    consecutive_failures: int
    initial: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error.to_dict(),
            "occurred_at": self.occurred_at.isoformat(),
            "consecutive_failures": self.consecutive_failures,
            "initial": self.initial,
            "retryable": self.error.retryable,
        }


@dataclasses.dataclass(frozen=True)
class ReloadState:
    """Engine health as last written by the reload loop.

    The loop publishes a fresh instance after every attempt; readers get an
    eventually-consistent view and never see a half-written one.
    """

    phase: ReloadPhase = ReloadPhase.UNINITIALIZED
    active_snapshot: Snapshot | None = None
    last_attempt: datetime | None = None
    last_success: datetime | None = None
    last_error: ErrorInfo | None = None
    consecutive_failures: int = 0
    reload_count: int = 0
    skipped_ticks: int = 0

    @property
    def collisions(self) -> tuple[MappingCollisionWarning, ...]:
        if self.active_snapshot is None:
            return ()
        return self.active_snapshot.collisions

    @property
    def healthy(self) -> bool:
        return self.phase in (ReloadPhase.READY, ReloadPhase.RELOADING) and self.consecutive_failures == 0


__all__ = ["ErrorInfo", "ReloadPhase", "ReloadResult", "ReloadState"]
