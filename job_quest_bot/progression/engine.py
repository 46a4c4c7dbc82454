from __future__ import annotations

from datetime import datetime

from .model import User

LOG_TIMESTAMP_FORMAT = "%d.%m %H:%M"


def xp_to_next(level: int) -> int:
    return level * 100


def append_log(user: User, text: str, now: datetime | None = None) -> None:
    stamp = (now or datetime.now()).strftime(LOG_TIMESTAMP_FORMAT)
    user.log.insert(0, f"{stamp} - {text}")


def format_reward(xp: int, gold: int) -> str:
    reward = f"+{xp} XP"
    if gold > 0:
        reward += f", +{gold} gold"
    return reward


def complete_quest(
    user: User,
    name: str,
    xp_gain: int,
    gold_gain: int,
    now: datetime | None = None,
) -> int | None:
    """Grant a quest reward and resolve every level-up it causes.

    Each level reached is logged in order, followed by one summary entry for
    the quest itself. Returns the final level when at least one level-up
    happened.
    """
    if xp_gain < 0 or gold_gain < 0:
        raise ValueError("quest rewards cannot be negative")

    user.xp += xp_gain
    user.gold += gold_gain

    new_level: int | None = None
    while user.xp >= xp_to_next(user.level):
        user.xp -= xp_to_next(user.level)
        user.level += 1
        new_level = user.level
        append_log(user, f"🆙 New level {user.level}", now)

    append_log(user, f"✅ {name} ({format_reward(xp_gain, gold_gain)})", now)
    return new_level


def punish(user: User, xp_penalty: int, now: datetime | None = None) -> int:
    if xp_penalty < 0:
        raise ValueError("penalty cannot be negative")
    lost = min(user.xp, xp_penalty)
    user.xp -= lost
    append_log(user, f"⚠️ Penalty: -{lost} XP for a missed check-in", now)
    return lost


def add_note(user: User, text: str, now: datetime | None = None) -> None:
    user.notes.insert(0, text)
    append_log(user, "📝 Note created", now)


def trim_history(user: User, log_limit: int, notes_limit: int) -> None:
    # Collections are newest first, so the tail is the oldest part.
    if log_limit > 0 and len(user.log) > log_limit:
        del user.log[log_limit:]
    if notes_limit > 0 and len(user.notes) > notes_limit:
        del user.notes[notes_limit:]
