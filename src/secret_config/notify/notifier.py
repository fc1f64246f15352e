"""Notify – ChangeNotifier and SnapshotChanged event."""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from secret_config.errors import ConfigurationError
from secret_config.observability import get_logger
from secret_config.snapshot import Snapshot

logger = get_logger(__name__)


@dataclass(frozen=True)
class SnapshotChanged:
    """Event delivered after a new snapshot has been published."""

    previous: Snapshot | None
    current: Snapshot

    @property
    def changed_keys(self) -> frozenset[str]:
        """Keys added, removed or carrying a different value."""
        before = self.previous.as_dict() if self.previous is not None else {}
        after = self.current.as_dict()
        return frozenset(
            key
            for key in before.keys() | after.keys()
            if before.get(key) != after.get(key)
        )


ChangeHandler = Callable[[SnapshotChanged], "Awaitable[None] | None"]


class ChangeNotifier:
    """Fire-and-forget fan-out of :class:`SnapshotChanged` events.

    Every handler runs in its own task, so a slow or failing subscriber never
    holds up the publisher or the other subscribers. Handlers may be plain
    functions or coroutine functions; exceptions are logged and dropped.
    """

    def __init__(self) -> None:
        self._handlers: list[ChangeHandler] = []
        self._pending: set[asyncio.Task[None]] = set()
        self._closed = False

    def subscribe(self, handler: ChangeHandler) -> Callable[[], None]:
        """Register *handler*; returns a callable that unsubscribes it."""
        if not callable(handler):
            raise ConfigurationError("change handler must be callable")
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, event: SnapshotChanged) -> int:
        """Schedule delivery of *event* to every subscriber; returns the count.

        Nothing is scheduled once the notifier is closed.
        """
        if self._closed:
            logger.debug("secret_config.publish_after_close")
            return 0
        loop = asyncio.get_running_loop()
        handlers = list(self._handlers)
        for handler in handlers:
            task = loop.create_task(self._deliver(handler, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return len(handlers)

    async def _deliver(self, handler: ChangeHandler, event: SnapshotChanged) -> None:
        try:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "secret_config.change_handler_failed",
                handler=getattr(handler, "__qualname__", repr(handler)),
                exc=repr(exc),
            )

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Refuse further events, cancel outstanding deliveries and wait for them."""
        self._closed = True
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    @property
    def pending_deliveries(self) -> int:
        return len(self._pending)


__all__ = ["ChangeHandler", "ChangeNotifier", "SnapshotChanged"]
