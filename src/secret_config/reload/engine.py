"""Reload – ReloadEngine: owns the active snapshot and the reload loop."""
from __future__ import annotations

import asyncio
import dataclasses
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from secret_config.clock import Clock, SystemClock
from secret_config.errors import (
    ConfigurationError,
    EngineStateError,
    FatalLoadError,
    TransientReloadError,
    error_log_fields,
)
from secret_config.mapping import ConfigurationKey, MappingFunction, MappingPolicy, resolve_mapper
from secret_config.notify import ChangeHandler, ChangeNotifier, SnapshotChanged
from secret_config.observability import get_logger
from secret_config.reload.loader import SecretLoader
from secret_config.reload.options import ReloadOptions
from secret_config.reload.retry import FetchRetryPolicy
from secret_config.reload.state import ErrorInfo, ReloadPhase, ReloadResult, ReloadState
from secret_config.snapshot import Snapshot, SnapshotBuilder
from secret_config.store import SecretStoreClient

ErrorCallback = Callable[[ErrorInfo], "Awaitable[None] | None"]


class ReloadEngine:
    """Expose a secret store as a periodically refreshed configuration view.

    Usage::

        engine = ReloadEngine(client, options=ReloadOptions(reload_interval=60))
        await engine.initialize()           # blocks until the first snapshot
        engine.get_value("App:Timeout")
        engine.on_change(lambda event: rebind(event.current))
        ...
        await engine.shutdown()

    Readers (:meth:`get_value`, :meth:`get_keys`, :attr:`snapshot`) never
    block and never raise transport errors: they dereference the active
    :class:`Snapshot`, which is replaced by a single assignment and never
    mutated. Reloads run one at a time under an ``asyncio.Lock``; a timer
    tick that finds a reload in flight is skipped, while :meth:`refresh_now`
    queues behind it.
    """

    def __init__(
        self,
        client: SecretStoreClient,
        mapper: MappingPolicy | MappingFunction | None = None,
        *,
        options: ReloadOptions | None = None,
        on_error: ErrorCallback | None = None,
        clock: Clock | None = None,
        notifier: ChangeNotifier | None = None,
        name: str = "secrets",
    ) -> None:
        if client is None:
            raise ConfigurationError("a secret store client is required")
        if not isinstance(client, SecretStoreClient):
            raise ConfigurationError(
                f"client must provide list_secrets() and get_secret(), got {type(client).__name__}"
            )
        if options is not None and not isinstance(options, ReloadOptions):
            raise ConfigurationError("options must be a ReloadOptions instance")
        if on_error is not None and not callable(on_error):
            raise ConfigurationError("on_error must be callable")

        self._options = options or ReloadOptions()
        self._clock = clock or SystemClock()
        mapping = resolve_mapper(mapper)
        self._builder = SnapshotBuilder(mapping, self._clock)
        self._loader = SecretLoader(
            client,
            mapping,
            max_concurrency=self._options.max_concurrency,
            retry=FetchRetryPolicy(
                max_attempts=self._options.fetch_retry_attempts,
                max_wait=self._options.fetch_retry_max_wait,
            ),
        )
        self._notifier = notifier or ChangeNotifier()
        self._on_error = on_error
        self._name = name
        self._log = get_logger(__name__, engine=name)

        self._snapshot: Snapshot | None = None
        self._state = ReloadState()
        self._lock = asyncio.Lock()
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> ReloadState:
        """Run the initial load and start the reload loop.

        Raises
        ------
        FatalLoadError
            When the initial load fails and ``tolerate_initial_failure`` is
            off. No snapshot is published; ``initialize`` may be retried.
        EngineStateError
            When the engine was already initialized or has been stopped.
        """
        if self._state.phase is not ReloadPhase.UNINITIALIZED:
            raise EngineStateError(
                f"cannot initialize engine in phase {self._state.phase.value!r}"
            )
        started = self._clock.now()
        self._set_state(phase=ReloadPhase.LOADING, last_attempt=started)

        async with self._lock:
            try:
                snapshot = await self._build()
            except asyncio.CancelledError:
                self._set_state(phase=ReloadPhase.UNINITIALIZED)
                raise
            except Exception as exc:
                return self._initial_failure(exc)

            self._snapshot = snapshot
            self._set_state(
                phase=ReloadPhase.READY,
                active_snapshot=snapshot,
                last_success=snapshot.loaded_at,
                consecutive_failures=0,
            )
        self._log.info(
            "secret_config.initialized",
            entries=len(snapshot),
            source_version=snapshot.source_version,
        )
        self._start_loop()
        return self._state

    def _initial_failure(self, exc: Exception) -> ReloadState:
        error = FatalLoadError(f"Initial secret load failed: {exc!r}", cause=exc)
        info = ErrorInfo(
            error=error,
            occurred_at=self._clock.now(),
            consecutive_failures=self._state.consecutive_failures + 1,
            initial=True,
        )
        if not self._options.tolerate_initial_failure:
            self._set_state(
                phase=ReloadPhase.UNINITIALIZED,
                last_error=info,
                consecutive_failures=info.consecutive_failures,
            )
            self._log.error("secret_config.initial_load_failed", exc=repr(exc))
            raise error

        snapshot = Snapshot.empty(self._clock.now())
        self._snapshot = snapshot
        self._set_state(
            phase=ReloadPhase.READY,
            active_snapshot=snapshot,
            last_error=info,
            consecutive_failures=info.consecutive_failures,
        )
        self._log.warning("secret_config.initial_load_tolerated", exc=repr(exc))
        self._start_loop()
        return self._state

    def _start_loop(self) -> None:
        interval = self._options.reload_interval
        if interval is None or self._stop.is_set():
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(interval), name=f"secret-config-reload:{self._name}"
        )

    async def shutdown(self) -> None:
        """Stop the reload loop. Idempotent; the last snapshot stays readable."""
        if self._state.phase is ReloadPhase.STOPPED:
            return
        self._set_state(phase=ReloadPhase.STOPPED)
        self._stop.set()
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self._notifier.close()
        self._log.info("secret_config.stopped")

    async def __aenter__(self) -> ReloadEngine:
        await self.initialize()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.shutdown()

    # ------------------------------------------------------------------
    # Reloading
    # ------------------------------------------------------------------

    async def refresh_now(self) -> ReloadResult:
        """Reload out of band and return the outcome of that attempt.

        Waits for an in-flight reload to finish first; readers are never
        blocked.
        """
        self._require_running()
        async with self._lock:
            self._require_running()
            return await self._reload_locked(trigger="manual")

    async def _run(self, interval: float) -> None:
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=interval)
                break
            except TimeoutError:
                pass
            try:
                await self._tick()
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                self._log.error("secret_config.reload_loop_error", exc=repr(exc))

    async def _tick(self) -> ReloadResult | None:
        """Run one scheduled reload, or skip it when another is in flight."""
        if self._lock.locked():
            self._set_state(skipped_ticks=self._state.skipped_ticks + 1)
            self._log.debug("secret_config.tick_skipped")
            return None
        async with self._lock:
            return await self._reload_locked(trigger="timer")

    async def _reload_locked(self, trigger: str) -> ReloadResult:
        self._set_state(
            phase=ReloadPhase.RELOADING,
            last_attempt=self._clock.now(),
            reload_count=self._state.reload_count + 1,
        )
        try:
            snapshot = await self._build()
        except asyncio.CancelledError:
            self._set_state(phase=ReloadPhase.READY)
            raise
        except Exception as exc:
            await self._reload_failure(exc, trigger)
            return ReloadResult.FAILED

        previous = self._snapshot
        if previous is not None and previous.source_version == snapshot.source_version:
            self._set_state(
                phase=ReloadPhase.READY,
                last_success=snapshot.loaded_at,
                consecutive_failures=0,
            )
            self._log.debug("secret_config.reload_unchanged", trigger=trigger)
            return ReloadResult.UNCHANGED

        self._snapshot = snapshot
        self._set_state(
            phase=ReloadPhase.READY,
            active_snapshot=snapshot,
            last_success=snapshot.loaded_at,
            consecutive_failures=0,
        )
        self._log.info(
            "secret_config.reloaded",
            trigger=trigger,
            entries=len(snapshot),
            source_version=snapshot.source_version,
        )
        if self._state.phase is not ReloadPhase.STOPPED:
            self._notifier.publish(SnapshotChanged(previous=previous, current=snapshot))
        return ReloadResult.CHANGED

    async def _reload_failure(self, exc: Exception, trigger: str) -> None:
        failures = self._state.consecutive_failures + 1
        info = ErrorInfo(
            error=TransientReloadError(f"Secret reload failed: {exc!r}", attempt=failures, cause=exc),
            occurred_at=self._clock.now(),
            consecutive_failures=failures,
        )
        self._set_state(
            phase=ReloadPhase.READY,
            last_error=info,
            consecutive_failures=failures,
        )
        self._log.warning(
            "secret_config.reload_failed",
            trigger=trigger,
            consecutive_failures=failures,
            exc=repr(exc),
            **error_log_fields(exc),
        )
        if self._on_error is None:
            return
        try:
            result = self._on_error(info)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as callback_exc:  # noqa: BLE001
            self._log.error("secret_config.error_callback_failed", exc=repr(callback_exc))

    async def _build(self) -> Snapshot:
        secrets = await self._loader.load()
        return self._builder.build(secrets)

    def _require_running(self) -> None:
        phase = self._state.phase
        if phase in (ReloadPhase.UNINITIALIZED, ReloadPhase.LOADING, ReloadPhase.STOPPED):
            raise EngineStateError(f"cannot reload engine in phase {phase.value!r}")

    def _set_state(self, **changes: Any) -> None:
        if self._state.phase is ReloadPhase.STOPPED:
            changes.pop("phase", None)
        self._state = dataclasses.replace(self._state, **changes)

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def get_value(self, key: str) -> str | None:
        """Value of *key* in the active snapshot, or ``None``."""
        snapshot = self._snapshot
        if snapshot is None:
            return None
        return snapshot.get(key)

    def get_keys(self, prefix: str = "") -> frozenset[ConfigurationKey]:
        """Keys equal to or nested below *prefix* in the active snapshot."""
        snapshot = self._snapshot
        if snapshot is None:
            return frozenset()
        return snapshot.keys_under(prefix)

    def children(self, prefix: str = "") -> frozenset[str]:
        """Segment names directly below *prefix* in the active snapshot."""
        snapshot = self._snapshot
        if snapshot is None:
            return frozenset()
        return snapshot.children(prefix)

    def on_change(self, handler: ChangeHandler) -> Callable[[], None]:
        """Subscribe to snapshot replacements; returns an unsubscribe callable."""
        return self._notifier.subscribe(handler)

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def state(self) -> ReloadState:
        return self._state

    @property
    def options(self) -> ReloadOptions:
        return self._options

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def loader(self) -> SecretLoader:
        return self._loader

    def __repr__(self) -> str:
        return f"ReloadEngine(name={self._name!r}, phase={self._state.phase.value!r})"


SecretConfigurationProvider = ReloadEngine

__all__ = ["ErrorCallback", "ReloadEngine", "SecretConfigurationProvider"]
