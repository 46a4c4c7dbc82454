from __future__ import annotations

import asyncio
import sqlite3
import sys
from datetime import datetime
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from job_quest_bot.progression import User  # noqa: E402
from job_quest_bot.reminders import FollowUpTimers, run_reminder_sweep  # noqa: E402
from job_quest_bot.store import UserStore  # noqa: E402

NOW = datetime(2026, 6, 2, 10, 15)


class _Notifier:
    def __init__(self, failing: set[int] | None = None) -> None:
        self.calls: list[tuple[int, int | None]] = []
        self.failing = failing or set()

    async def __call__(self, user_id: int, penalty: int | None) -> None:
        self.calls.append((user_id, penalty))
        if user_id in self.failing:
            raise RuntimeError("DMs are closed")


def test_sweep_punishes_unanswered_and_prompts_everyone(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "quests.db")
    notifier = _Notifier()
    prompted_ids: list[int] = []

    async def _run():
        await store.init()
        await store.save(1, User(xp=25, awaiting_ping=True))
        await store.save(2, User(xp=25))
        result = await run_reminder_sweep(
            store,
            notifier,
            penalty_xp=10,
            now=NOW,
            on_prompt=prompted_ids.append,
        )
        return result, await store.load(1), await store.load(2)

    result, ignored, answered = asyncio.run(_run())

    assert (result.prompted, result.punished, result.failed) == (2, 1, 0)
    assert notifier.calls == [(1, 10), (2, None)]
    assert prompted_ids == [1, 2]
    assert ignored.xp == 15
    assert "Penalty" in ignored.log[0]
    assert answered.xp == 25
    assert answered.log == []
    for user in (ignored, answered):
        assert user.awaiting_ping is True
        assert user.last_ping_at == NOW


def test_sweep_continues_after_delivery_failure(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "quests.db")
    notifier = _Notifier(failing={1})

    async def _run():
        await store.init()
        await store.save(1, User())
        await store.save(2, User())
        return await run_reminder_sweep(store, notifier, penalty_xp=10, now=NOW)

    result = asyncio.run(_run())

    assert (result.prompted, result.failed) == (1, 1)
    assert [user_id for user_id, _ in notifier.calls] == [1, 2]


def test_sweep_skips_user_whose_record_cannot_be_read(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "quests.db")
    notifier = _Notifier()

    async def _run():
        await store.init()
        await store.save(1, User(level=7, xp=120, gold=42, awaiting_ping=True))
        await store.save(2, User(xp=25))
        real_get = store.get

        async def _flaky_get(key: str) -> bytes | None:
            if key == "user:1":
                raise sqlite3.OperationalError("database is locked")
            return await real_get(key)

        store.get = _flaky_get  # type: ignore[method-assign]
        result = await run_reminder_sweep(store, notifier, penalty_xp=10, now=NOW)
        del store.get
        return result, await store.load(1), await store.load(2)

    result, skipped, prompted = asyncio.run(_run())

    assert (result.prompted, result.punished, result.failed) == (1, 0, 1)
    assert notifier.calls == [(2, None)]
    assert (skipped.level, skipped.xp, skipped.gold) == (7, 120, 42)
    assert skipped.log == []
    assert skipped.last_ping_at is None
    assert prompted.awaiting_ping is True


def test_penalty_is_floored_at_zero_xp(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "quests.db")

    async def _run() -> User:
        await store.init()
        await store.save(1, User(level=3, xp=4, awaiting_ping=True))
        await run_reminder_sweep(store, _Notifier(), penalty_xp=10, now=NOW)
        return await store.load(1)

    user = asyncio.run(_run())

    assert (user.level, user.xp) == (3, 0)


def test_follow_up_fires_after_delay() -> None:
    fired: list[int] = []

    async def _fire(user_id: int) -> None:
        fired.append(user_id)

    async def _run() -> bool:
        timers = FollowUpTimers(0.01, _fire)
        timers.schedule(7)
        pending = timers.pending(7)
        await asyncio.sleep(0.05)
        return pending and not timers.pending(7)

    assert asyncio.run(_run()) is True
    assert fired == [7]


def test_rescheduling_replaces_pending_follow_up() -> None:
    fired: list[int] = []

    async def _fire(user_id: int) -> None:
        fired.append(user_id)

    async def _run() -> None:
        timers = FollowUpTimers(0.02, _fire)
        first = timers.schedule(7)
        timers.schedule(7)
        await asyncio.sleep(0.08)
        assert first.cancelled()

    asyncio.run(_run())

    assert fired == [7]


def test_cancel_prevents_follow_up() -> None:
    fired: list[int] = []

    async def _fire(user_id: int) -> None:
        fired.append(user_id)

    async def _run() -> tuple[bool, bool]:
        timers = FollowUpTimers(0.02, _fire)
        timers.schedule(1)
        timers.schedule(2)
        cancelled = timers.cancel(1)
        again = timers.cancel(1)
        await asyncio.sleep(0.08)
        return cancelled, again

    cancelled, again = asyncio.run(_run())

    assert (cancelled, again) == (True, False)
    assert fired == [2]


def test_cancel_all_and_failing_fire_are_contained() -> None:
    async def _fire(user_id: int) -> None:
        raise RuntimeError("transport down")

    async def _run() -> None:
        timers = FollowUpTimers(0.0, _fire)
        timers.schedule(1)
        await asyncio.sleep(0.02)
        assert not timers.pending(1)

        slow = FollowUpTimers(10.0, _fire)
        task = slow.schedule(2)
        await slow.cancel_all()
        assert task.cancelled()
        assert not slow.pending(2)

    asyncio.run(_run())
