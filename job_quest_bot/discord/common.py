from __future__ import annotations

import re

# Discord caps a message at 2000 characters; leave room for markup.
MESSAGE_LIMIT = 1900


def collapse_spaces(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def chunk_text(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    if len(text) <= limit:
        return [text]
    parts: list[str] = []
    current = ""
    for line in text.splitlines(keepends=True):
        if len(current) + len(line) <= limit:
            current += line
            continue
        if current:
            parts.append(current)
            current = ""
        if len(line) <= limit:
            current = line
        else:
            for i in range(0, len(line), limit):
                parts.append(line[i : i + limit])
    if current:
        parts.append(current)
    return parts


def sender_id(author: object) -> int | None:
    raw = getattr(author, "id", None)
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None
    return raw
