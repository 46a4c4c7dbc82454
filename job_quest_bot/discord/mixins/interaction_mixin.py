from __future__ import annotations

import logging

import discord

from ...menus import Menu
from ...router import FollowUp, Reply
from ...store import STORAGE_ERRORS
from ..common import MESSAGE_LIMIT, chunk_text, sender_id
from ..views import MenuView

logger = logging.getLogger("job_quest_bot")

SHARED_MENU_NOTICE = "🔒 Menus live in DMs. Send `{command}` to get your own."


class InteractionMixin:
    def _menu_view(self, menu: Menu) -> MenuView | None:
        if not menu:
            return None
        timeout = float(self.settings.menu_timeout_seconds) or None
        return MenuView.from_menu(menu, self._handle_button, timeout=timeout)

    def _apply_follow_up(self, user_id: int, follow_up: FollowUp) -> None:
        if follow_up is FollowUp.SCHEDULE:
            self.follow_ups.schedule(user_id)
        elif follow_up is FollowUp.CANCEL:
            self.follow_ups.cancel(user_id)

    async def _edit_with_reply(self, interaction: discord.Interaction, reply: Reply) -> None:
        pages = chunk_text(reply.text, MESSAGE_LIMIT)
        await interaction.response.edit_message(content=pages[0], view=self._menu_view(reply.menu))
        for page in pages[1:]:
            await interaction.followup.send(page)

    async def _refuse_shared_menu(self, interaction: discord.Interaction) -> None:
        # A message in a guild channel is visible to everyone; never render a record there.
        command = f"{self.settings.command_prefix}{self.settings.start_command}"
        await interaction.response.send_message(SHARED_MENU_NOTICE.format(command=command), ephemeral=True)

    async def _handle_button(self, interaction: discord.Interaction, token: str) -> None:
        user_id = sender_id(interaction.user)
        if user_id is None:
            return

        try:
            if interaction.guild_id is not None:
                await self._refuse_shared_menu(interaction)
                return

            async with self.store.lock(user_id):
                try:
                    user = await self.store.read(user_id)
                except STORAGE_ERRORS as exc:
                    logger.warning("Dropping button %r for user=%s, record unreadable: %s", token, user_id, exc)
                    return
                reply = self.router.handle_token(user, token)
                if reply is not None:
                    await self.store.save(user_id, user)

            if reply is None:
                await interaction.response.defer()
                return
            self._apply_follow_up(user_id, reply.follow_up)
            await self._edit_with_reply(interaction, reply)
        except discord.HTTPException as exc:
            logger.exception("Failed to answer button %r for user=%s: %s", token, user_id, exc)
