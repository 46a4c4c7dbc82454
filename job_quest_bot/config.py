from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()


def _env_lookup(name: str, aliases: tuple[str, ...] = ()) -> str | None:
    for key in (name, *aliases):
        # Be tolerant to UTF-8 BOM accidentally saved in .env key names.
        for candidate in (key, f"\ufeff{key}"):
            raw = os.getenv(candidate)
            if raw is not None:
                return raw
    return None


def _env_bool(name: str, default: bool, aliases: tuple[str, ...] = ()) -> bool:
    raw = _env_lookup(name, aliases)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int, aliases: tuple[str, ...] = ()) -> int:
    raw = _env_lookup(name, aliases)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str, aliases: tuple[str, ...] = ()) -> str:
    raw = _env_lookup(name, aliases)
    if raw is None:
        return default
    value = raw.strip()
    return value if value else default


def _clean_token(value: str) -> str:
    cleaned = value.strip()
    if cleaned.lower().startswith("bot "):
        cleaned = cleaned[4:].strip()
    if (cleaned.startswith('"') and cleaned.endswith('"')) or (
        cleaned.startswith("'") and cleaned.endswith("'")
    ):
        cleaned = cleaned[1:-1].strip()
    return cleaned


TOKEN_PLACEHOLDER = "put_your_discord_bot_token_here"


@dataclass(slots=True)
class Settings:
    discord_token: str
    command_prefix: str
    start_command: str
    discord_message_content_intent: bool

    sqlite_path: Path
    log_display_limit: int
    log_retention: int
    notes_retention: int
    menu_timeout_seconds: int

    reminder_enabled: bool
    reminder_interval_seconds: int
    reminder_follow_up_seconds: int
    reminder_penalty_xp: int

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            discord_token=_clean_token(_env_lookup("DISCORD_TOKEN", aliases=("BOT_TOKEN",)) or ""),
            command_prefix=_env_str("DISCORD_COMMAND_PREFIX", "!"),
            start_command=_env_str("START_COMMAND", "start").lower(),
            discord_message_content_intent=_env_bool("DISCORD_MESSAGE_CONTENT_INTENT", True),
            sqlite_path=Path(_env_str("SQLITE_PATH", "./data/job_quest.db")).expanduser(),
            log_display_limit=_env_int("LOG_DISPLAY_LIMIT", 10),
            log_retention=_env_int("LOG_RETENTION", 500),
            notes_retention=_env_int("NOTES_RETENTION", 200),
            menu_timeout_seconds=_env_int("MENU_TIMEOUT_SECONDS", 600),
            reminder_enabled=_env_bool("REMINDER_ENABLED", True),
            reminder_interval_seconds=_env_int("REMINDER_INTERVAL_SECONDS", 900),
            reminder_follow_up_seconds=_env_int("REMINDER_FOLLOW_UP_SECONDS", 60),
            reminder_penalty_xp=_env_int("REMINDER_PENALTY_XP", 10),
        )

    def validate(self) -> None:
        if not self.discord_token:
            raise ValueError("DISCORD_TOKEN is required")
        if self.discord_token == TOKEN_PLACEHOLDER:
            raise ValueError("DISCORD_TOKEN is still placeholder")
        if not self.command_prefix.strip():
            raise ValueError("DISCORD_COMMAND_PREFIX cannot be empty")
        if not self.start_command.strip():
            raise ValueError("START_COMMAND cannot be empty")

        if self.log_display_limit < 1:
            raise ValueError("LOG_DISPLAY_LIMIT must be >= 1")
        if self.log_retention < 0:
            raise ValueError("LOG_RETENTION must be >= 0 (0 disables the cap)")
        if self.log_retention and self.log_retention < self.log_display_limit:
            raise ValueError("LOG_RETENTION must be 0 or >= LOG_DISPLAY_LIMIT")
        if self.notes_retention < 0:
            raise ValueError("NOTES_RETENTION must be >= 0 (0 disables the cap)")
        if self.menu_timeout_seconds < 0:
            raise ValueError("MENU_TIMEOUT_SECONDS must be >= 0 (0 keeps menus bound forever)")

        if self.reminder_interval_seconds < 30:
            raise ValueError("REMINDER_INTERVAL_SECONDS must be >= 30")
        if self.reminder_follow_up_seconds < 1:
            raise ValueError("REMINDER_FOLLOW_UP_SECONDS must be >= 1")
        if self.reminder_penalty_xp < 0:
            raise ValueError("REMINDER_PENALTY_XP must be >= 0")
