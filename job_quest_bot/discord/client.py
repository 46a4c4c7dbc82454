from __future__ import annotations

import asyncio
import contextlib
import logging

import discord

from ..config import Settings
from ..reminders import FollowUpTimers
from ..router import InteractionRouter
from ..store import UserStore
from .mixins import InteractionMixin, MessageMixin, ReminderMixin
from .views import MenuView

logger = logging.getLogger("job_quest_bot")


class JobQuestDiscordBot(
    MessageMixin,
    InteractionMixin,
    ReminderMixin,
    discord.Client,
):
    def __init__(
        self,
        settings: Settings,
        store: UserStore,
        router: InteractionRouter,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = settings.discord_message_content_intent

        super().__init__(intents=intents)

        self.settings = settings
        self.store = store
        self.router = router
        self.follow_ups = FollowUpTimers(settings.reminder_follow_up_seconds, self._send_follow_up)
        self.reminder_task: asyncio.Task[None] | None = None

    async def setup_hook(self) -> None:
        await self.store.init()
        self.add_view(MenuView.persistent(self._handle_button))

        if self.settings.reminder_enabled:
            self.reminder_task = asyncio.create_task(self._reminder_loop(), name="reminder-loop")
        else:
            logger.info("Reminders are disabled in config.")

    async def close(self) -> None:
        await self._cancel_task(self.reminder_task)
        await self.follow_ups.cancel_all()
        await self._run_shutdown_step("discord.Client.close", super().close(), timeout=6.0)

    async def _run_shutdown_step(self, label: str, coro: object, *, timeout: float) -> None:
        try:
            await asyncio.wait_for(coro, timeout=timeout)  # type: ignore[arg-type]
        except asyncio.TimeoutError:
            logger.warning("Shutdown step timed out: %s", label)
        except Exception as exc:
            logger.warning("Shutdown step failed: %s (%s)", label, exc)

    async def _cancel_task(self, task: asyncio.Task[None] | None) -> None:
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def on_ready(self) -> None:
        if self.user:
            logger.info("Connected as %s (%s)", self.user, self.user.id)
