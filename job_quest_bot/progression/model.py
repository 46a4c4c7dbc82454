from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class InputMode(str, Enum):
    """What the next free-text message from the user is expected to mean."""

    NONE = "none"
    ADD_NOTE = "add_note"

    @property
    def expects_text(self) -> bool:
        return self is not InputMode.NONE


@dataclass(slots=True)
class User:
    level: int = 1
    xp: int = 0
    gold: int = 0
    log: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    input_mode: InputMode = InputMode.NONE
    awaiting_ping: bool = False
    last_ping_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "xp": self.xp,
            "gold": self.gold,
            "log": list(self.log),
            "notes": list(self.notes),
            "input_mode": self.input_mode.value,
            "awaiting_ping": self.awaiting_ping,
            "last_ping_at": self.last_ping_at.isoformat() if self.last_ping_at is not None else None,
        }

    @classmethod
    def from_dict(cls, payload: object) -> "User":
        if not isinstance(payload, dict):
            raise ValueError("user record must be a JSON object")

        level = _required_int(payload, "level", minimum=1)
        xp = _required_int(payload, "xp", minimum=0)
        gold = _required_int(payload, "gold", minimum=0)

        raw_mode = payload.get("input_mode", InputMode.NONE.value)
        try:
            input_mode = InputMode(raw_mode)
        except ValueError as exc:
            raise ValueError(f"unknown input mode: {raw_mode!r}") from exc

        awaiting_ping = payload.get("awaiting_ping", False)
        if not isinstance(awaiting_ping, bool):
            raise ValueError("awaiting_ping must be a boolean")

        raw_ping_at = payload.get("last_ping_at")
        last_ping_at: datetime | None = None
        if raw_ping_at is not None:
            if not isinstance(raw_ping_at, str):
                raise ValueError("last_ping_at must be an ISO timestamp")
            last_ping_at = datetime.fromisoformat(raw_ping_at)

        return cls(
            level=level,
            xp=xp,
            gold=gold,
            log=_string_list(payload, "log"),
            notes=_string_list(payload, "notes"),
            input_mode=input_mode,
            awaiting_ping=awaiting_ping,
            last_ping_at=last_ping_at,
        )

    def dumps(self) -> bytes:
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")

    @classmethod
    def loads(cls, raw: bytes | str) -> "User":
        """Parse a stored snapshot; any malformed input raises ``ValueError``."""
        try:
            payload = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValueError(f"user record is not valid JSON: {exc}") from exc
        return cls.from_dict(payload)


def _required_int(payload: dict[str, Any], name: str, *, minimum: int) -> int:
    value = payload.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _string_list(payload: dict[str, Any], name: str) -> list[str]:
    value = payload.get(name, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{name} must be a list of strings")
    return list(value)
