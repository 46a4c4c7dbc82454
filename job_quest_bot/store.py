from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from .progression import User, trim_history
from .storage import KeyValueRecordsMixin, KeyValueSchemaMixin

logger = logging.getLogger("job_quest_bot")

USER_KEY_PREFIX = "user:"
STORAGE_ERRORS = (aiosqlite.Error, OSError)


def user_key(user_id: int) -> str:
    return f"{USER_KEY_PREFIX}{user_id}"


class UserStore(
    KeyValueSchemaMixin,
    KeyValueRecordsMixin,
):
    """Whole-record user snapshots on top of an embedded key-value table.

    ``load`` never fails: a missing, unreadable or corrupt record comes back
    as a fresh default ``User``. ``read`` and ``edit`` let storage errors
    propagate, since a default written back would replace the real record.
    Writes are logged and reported on failure instead of raising. Mutations
    should go through ``edit`` so that each identity has a single writer at a
    time.
    """

    backend_name = "sqlite"

    def __init__(self, db_path: Path, *, log_retention: int = 0, notes_retention: int = 0) -> None:
        super().__init__(db_path)
        self.log_retention = max(0, int(log_retention))
        self.notes_retention = max(0, int(notes_retention))
        self._locks: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock(self, user_id: int) -> asyncio.Lock:
        return self._locks[user_id]

    async def read(self, user_id: int) -> User:
        key = user_key(user_id)
        raw = await self.get(key)
        if raw is None:
            return User()
        try:
            return User.loads(raw)
        except ValueError as exc:
            logger.warning("Corrupt record %s, using defaults: %s", key, exc)
            return User()

    async def load(self, user_id: int) -> User:
        try:
            return await self.read(user_id)
        except STORAGE_ERRORS as exc:
            logger.warning("Failed to read %s, using defaults: %s", user_key(user_id), exc)
            return User()

    async def save(self, user_id: int, user: User) -> bool:
        trim_history(user, self.log_retention, self.notes_retention)
        key = user_key(user_id)
        try:
            await self.put(key, user.dumps())
        except STORAGE_ERRORS:
            logger.exception("Failed to write %s; the change is lost", key)
            return False
        return True

    async def all(self) -> list[tuple[int, User]]:
        rows = await self.scan_prefix(USER_KEY_PREFIX)
        users: list[tuple[int, User]] = []
        for key, raw in rows:
            try:
                user_id = int(key[len(USER_KEY_PREFIX) :])
            except ValueError:
                logger.warning("Skipping record with malformed key %r", key)
                continue
            try:
                users.append((user_id, User.loads(raw)))
            except ValueError as exc:
                logger.warning("Skipping corrupt record %s: %s", key, exc)
        return users

    @asynccontextmanager
    async def edit(self, user_id: int) -> AsyncIterator[User]:
        async with self.lock(user_id):
            user = await self.read(user_id)
            yield user
            await self.save(user_id, user)
