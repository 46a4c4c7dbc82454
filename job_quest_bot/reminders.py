from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

from .progression import issue_reminder
from .store import STORAGE_ERRORS, UserStore

logger = logging.getLogger("job_quest_bot")

ReminderNotifier = Callable[[int, Optional[int]], Awaitable[None]]


@dataclass(slots=True)
class SweepResult:
    prompted: int = 0
    punished: int = 0
    failed: int = 0


async def run_reminder_sweep(
    store: UserStore,
    notify: ReminderNotifier,
    *,
    penalty_xp: int,
    now: datetime | None = None,
    on_prompt: Callable[[int], object] | None = None,
) -> SweepResult:
    """Penalize unanswered check-ins and open a new one for every stored user.

    The record is persisted before the prompt goes out, so a user who answers
    immediately always sees the new check-in state. A user whose record cannot
    be re-read is skipped and counted as failed; the stored record is kept.
    """
    moment = now or datetime.now()
    result = SweepResult()
    for user_id, _snapshot in await store.all():
        try:
            async with store.edit(user_id) as user:
                penalty = issue_reminder(user, penalty_xp, moment)
        except STORAGE_ERRORS as exc:
            result.failed += 1
            logger.warning("Skipping check-in for user=%s, record unreadable: %s", user_id, exc)
            continue
        if penalty is not None:
            result.punished += 1
        if on_prompt is not None:
            on_prompt(user_id)
        try:
            await notify(user_id, penalty)
        except Exception:
            result.failed += 1
            logger.exception("Failed to deliver check-in to user=%s", user_id)
            continue
        result.prompted += 1
    return result


class FollowUpTimers:
    """At most one pending follow-up per identity; rescheduling replaces it."""

    def __init__(self, delay_seconds: float, fire: Callable[[int], Awaitable[None]]) -> None:
        self.delay_seconds = float(delay_seconds)
        self._fire = fire
        self._tasks: dict[int, asyncio.Task[None]] = {}

    def pending(self, user_id: int) -> bool:
        task = self._tasks.get(user_id)
        return task is not None and not task.done()

    def schedule(self, user_id: int) -> asyncio.Task[None]:
        self.cancel(user_id)
        task = asyncio.create_task(self._run(user_id), name=f"follow-up-{user_id}")
        self._tasks[user_id] = task
        return task

    def cancel(self, user_id: int) -> bool:
        task = self._tasks.pop(user_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def cancel_all(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self, user_id: int) -> None:
        try:
            await asyncio.sleep(self.delay_seconds)
            await self._fire(user_id)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Follow-up for user=%s failed", user_id)
        finally:
            if self._tasks.get(user_id) is asyncio.current_task():
                self._tasks.pop(user_id, None)
