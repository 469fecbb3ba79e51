"""Unit tests for studytimer_cli.models.focus.scheduler."""

from __future__ import annotations

import asyncio

import pytest

from studytimer_cli.models.focus.scheduler import AsyncioScheduler, Handle, ManualScheduler


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------


class TestHandle:
    def test_new_handle_is_active(self):
        assert Handle().active is True

    def test_cancel_is_idempotent(self):
        handle = Handle()
        handle.cancel()
        handle.cancel()
        assert handle.active is False


# ---------------------------------------------------------------------------
# ManualScheduler
# ---------------------------------------------------------------------------


class TestManualScheduler:
    def test_nothing_fires_without_advance(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.schedule_once(1, lambda: calls.append("x"))
        assert calls == []
        assert scheduler.pending == 1

    def test_schedule_once_fires_once(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.schedule_once(2, lambda: calls.append(scheduler.now))

        scheduler.advance(1.5)
        assert calls == []
        scheduler.advance(10)
        assert calls == [2]
        assert handle.active is False
        assert scheduler.pending == 0

    def test_schedule_every_fires_each_interval(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.schedule_every(1, lambda: calls.append(scheduler.now))

        scheduler.advance(3)
        assert calls == [1, 2, 3]
        assert scheduler.now == 3

    def test_cancelled_callback_does_not_fire(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.schedule_every(1, lambda: calls.append(1))
        scheduler.advance(2)
        handle.cancel()
        scheduler.advance(5)
        assert calls == [1, 1]

    def test_callback_can_cancel_itself(self):
        scheduler = ManualScheduler()
        calls = []
        handle = None

        def _cb():
            calls.append(scheduler.now)
            if len(calls) == 2:
                handle.cancel()

        handle = scheduler.schedule_every(1, _cb)
        scheduler.advance(10)
        assert calls == [1, 2]

    def test_jobs_scheduled_during_advance_fire_in_same_advance(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.schedule_once(1, lambda: scheduler.schedule_once(2, lambda: calls.append(scheduler.now)))

        scheduler.advance(5)
        assert calls == [3]

    def test_same_due_time_fires_in_schedule_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.schedule_once(1, lambda: calls.append("a"))
        scheduler.schedule_once(1, lambda: calls.append("b"))

        scheduler.advance(1)
        assert calls == ["a", "b"]

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            ManualScheduler().schedule_every(0, lambda: None)


# ---------------------------------------------------------------------------
# AsyncioScheduler
# ---------------------------------------------------------------------------


class TestAsyncioScheduler:
    def test_schedule_once_runs_on_loop(self):
        async def _run():
            scheduler = AsyncioScheduler()
            calls = []
            handle = scheduler.schedule_once(0.01, lambda: calls.append(1))
            await asyncio.sleep(0.05)
            return calls, handle

        calls, handle = asyncio.run(_run())
        assert calls == [1]
        assert handle.active is False

    def test_schedule_every_repeats_until_cancelled(self):
        async def _run():
            scheduler = AsyncioScheduler()
            calls = []
            handle = scheduler.schedule_every(0.01, lambda: calls.append(1))
            await asyncio.sleep(0.055)
            handle.cancel()
            count = len(calls)
            await asyncio.sleep(0.03)
            return count, len(calls)

        count, final = asyncio.run(_run())
        assert count >= 2
        assert final == count

    def test_cancel_before_fire(self):
        async def _run():
            scheduler = AsyncioScheduler()
            calls = []
            handle = scheduler.schedule_once(0.01, lambda: calls.append(1))
            handle.cancel()
            await asyncio.sleep(0.03)
            return calls

        assert asyncio.run(_run()) == []
