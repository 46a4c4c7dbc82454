from __future__ import annotations

from .utils import _sqlite_connection, prefix_upper_bound


class KeyValueRecordsMixin:
    async def get(self, key: str) -> bytes | None:
        async with _sqlite_connection(self.db_path) as db:
            async with db.execute("SELECT value FROM kv_records WHERE key = ?", (key,)) as cursor:
                row = await cursor.fetchone()
        if row is None:
            return None
        value = row[0]
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    async def put(self, key: str, value: bytes) -> None:
        async with _sqlite_connection(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO kv_records (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            await db.commit()

    async def scan_prefix(self, prefix: str) -> list[tuple[str, bytes]]:
        async with _sqlite_connection(self.db_path) as db:
            async with db.execute(
                """
                SELECT key, value
                FROM kv_records
                WHERE key >= ? AND key < ?
                ORDER BY key
                """,
                (prefix, prefix_upper_bound(prefix)),
            ) as cursor:
                rows = await cursor.fetchall()
        result: list[tuple[str, bytes]] = []
        for key, value in rows:
            result.append((str(key), value.encode("utf-8") if isinstance(value, str) else bytes(value)))
        return result
