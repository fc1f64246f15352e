"""Unit tests for ChangeNotifier."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from secret_config.errors import ConfigurationError
from secret_config.notify import ChangeNotifier, SnapshotChanged
from secret_config.snapshot import Snapshot

T0 = datetime(2024, 5, 1, tzinfo=UTC)


def _event(before: dict[str, str] | None, after: dict[str, str]) -> SnapshotChanged:
    previous = None if before is None else Snapshot(before, loaded_at=T0, source_version="1")  # type: ignore[arg-type]
    current = Snapshot(after, loaded_at=T0, source_version="2")  # type: ignore[arg-type]
    return SnapshotChanged(previous=previous, current=current)


# ---------------------------------------------------------------------------
# SnapshotChanged
# ---------------------------------------------------------------------------


class TestSnapshotChanged:
    def test_changed_keys_covers_added_removed_and_updated(self) -> None:
        event = _event({"A": "1", "B": "2", "C": "3"}, {"A": "1", "B": "20", "D": "4"})
        assert event.changed_keys == {"B", "C", "D"}

    def test_changed_keys_without_previous(self) -> None:
        assert _event(None, {"A": "1"}).changed_keys == {"A"}


# ---------------------------------------------------------------------------
# ChangeNotifier
# ---------------------------------------------------------------------------


class TestChangeNotifier:
    def test_delivers_to_sync_and_async_handlers(self) -> None:
        received: list[str] = []

        async def on_async(event: SnapshotChanged) -> None:
            received.append("async")

        async def scenario() -> int:
            notifier = ChangeNotifier()
            notifier.subscribe(lambda event: received.append("sync"))
            notifier.subscribe(on_async)
            count = notifier.publish(_event(None, {"A": "1"}))
            await notifier.drain()
            return count

        assert asyncio.run(scenario()) == 2
        assert sorted(received) == ["async", "sync"]

    def test_publish_does_not_run_handlers_inline(self) -> None:
        received: list[SnapshotChanged] = []

        async def scenario() -> None:
            notifier = ChangeNotifier()
            notifier.subscribe(received.append)
            notifier.publish(_event(None, {"A": "1"}))
            assert received == []
            await notifier.drain()
            assert len(received) == 1

        asyncio.run(scenario())

    def test_failing_handler_isolated(self) -> None:
        received: list[SnapshotChanged] = []

        def broken(event: SnapshotChanged) -> None:
            raise RuntimeError("subscriber bug")

        async def scenario() -> None:
            notifier = ChangeNotifier()
            notifier.subscribe(broken)
            notifier.subscribe(received.append)
            notifier.publish(_event(None, {"A": "1"}))
            await notifier.drain()

        asyncio.run(scenario())
        assert len(received) == 1

    def test_unsubscribe(self) -> None:
        received: list[SnapshotChanged] = []

        async def scenario() -> None:
            notifier = ChangeNotifier()
            unsubscribe = notifier.subscribe(received.append)
            unsubscribe()
            unsubscribe()
            assert notifier.subscriber_count == 0
            assert notifier.publish(_event(None, {"A": "1"})) == 0
            await notifier.drain()

        asyncio.run(scenario())
        assert received == []

    def test_close_cancels_pending_deliveries(self) -> None:
        cancelled: list[bool] = []

        async def stuck(event: SnapshotChanged) -> None:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        async def scenario() -> ChangeNotifier:
            notifier = ChangeNotifier()
            notifier.subscribe(stuck)
            notifier.publish(_event(None, {"A": "1"}))
            await asyncio.sleep(0)
            assert notifier.pending_deliveries == 1
            await notifier.close()
            return notifier

        notifier = asyncio.run(scenario())
        assert cancelled == [True]
        assert notifier.pending_deliveries == 0

    def test_publish_after_close_is_dropped(self) -> None:
        received: list[SnapshotChanged] = []

        async def scenario() -> int:
            notifier = ChangeNotifier()
            notifier.subscribe(received.append)
            await notifier.close()
            scheduled = notifier.publish(_event(None, {"A": "1"}))
            await asyncio.sleep(0)
            assert notifier.pending_deliveries == 0
            return scheduled

        assert asyncio.run(scenario()) == 0
        assert received == []

    def test_non_callable_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ChangeNotifier().subscribe("handler")  # type: ignore[arg-type]
