from __future__ import annotations

import asyncio
import logging

import discord

from ...reminders import SweepResult, run_reminder_sweep
from ...router import follow_up_prompt, reminder_prompt

logger = logging.getLogger("job_quest_bot")


class ReminderMixin:
    async def _reminder_loop(self) -> None:
        await self.wait_until_ready()
        interval = float(self.settings.reminder_interval_seconds)
        while not self.is_closed():
            await asyncio.sleep(interval)
            await self._run_reminder_sweep()

    async def _run_reminder_sweep(self) -> SweepResult | None:
        try:
            result = await run_reminder_sweep(
                self.store,
                self._send_reminder,
                penalty_xp=self.settings.reminder_penalty_xp,
                on_prompt=self.follow_ups.cancel,
            )
        except Exception:
            logger.exception("Reminder sweep failed")
            return None
        logger.info(
            "Reminder sweep done: prompted=%s punished=%s failed=%s",
            result.prompted,
            result.punished,
            result.failed,
        )
        return result

    async def _resolve_recipient(self, user_id: int) -> discord.abc.Messageable:
        recipient = self.get_user(user_id)
        if recipient is None:
            recipient = await self.fetch_user(user_id)
        return recipient

    async def _send_reminder(self, user_id: int, penalty: int | None) -> None:
        recipient = await self._resolve_recipient(user_id)
        await self._send_reply(recipient, reminder_prompt(penalty))

    async def _send_follow_up(self, user_id: int) -> None:
        user = await self.store.load(user_id)
        if not user.awaiting_ping:
            return
        recipient = await self._resolve_recipient(user_id)
        await self._send_reply(recipient, follow_up_prompt())
