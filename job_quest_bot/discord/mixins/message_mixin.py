from __future__ import annotations

import logging

import discord

from ...router import Reply
from ...store import STORAGE_ERRORS
from ..common import MESSAGE_LIMIT, chunk_text, collapse_spaces, sender_id

logger = logging.getLogger("job_quest_bot")


class MessageMixin:
    def _is_start_command(self, content: str) -> bool:
        raw = collapse_spaces(content)
        if not raw:
            return False
        prefix = self.settings.command_prefix.strip()
        if not prefix or not raw.startswith(prefix):
            return False
        return raw[len(prefix) :].strip().lower() == self.settings.start_command

    async def _send_reply(self, channel: discord.abc.Messageable, reply: Reply) -> None:
        chunks = chunk_text(reply.text, MESSAGE_LIMIT)
        for index, chunk in enumerate(chunks):
            view = self._menu_view(reply.menu) if index == len(chunks) - 1 else None
            if view is None:
                await channel.send(chunk)
            else:
                await channel.send(chunk, view=view)

    async def _handle_start(self, message: discord.Message, user_id: int) -> None:
        async with self.store.edit(user_id) as user:
            reply = self.router.start(user)
        # Menus show the caller's record, so a start from a guild channel is answered in DMs.
        target = message.channel if message.guild is None else message.author
        await self._send_reply(target, reply)

    async def _handle_free_text(self, message: discord.Message, user_id: int) -> None:
        async with self.store.lock(user_id):
            user = await self.store.read(user_id)
            reply = self.router.handle_text(user, message.content)
            if reply is None:
                return
            await self.store.save(user_id, user)
        await self._send_reply(message.channel, reply)

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return
        user_id = sender_id(message.author)
        if user_id is None:
            return

        try:
            if self._is_start_command(message.content):
                await self._handle_start(message, user_id)
            elif message.guild is None:
                await self._handle_free_text(message, user_id)
        except STORAGE_ERRORS as exc:
            logger.warning("Dropping message from user=%s, record unreadable: %s", user_id, exc)
        except discord.HTTPException as exc:
            logger.exception("Failed to answer message from user=%s: %s", user_id, exc)
