from __future__ import annotations

from datetime import datetime

from .engine import punish
from .model import User


def issue_reminder(user: User, penalty_xp: int, now: datetime | None = None) -> int | None:
    """Open a new check-in, penalizing the user if the previous one went unanswered.

    Returns the XP actually removed, or ``None`` when no penalty was due.
    """
    moment = now or datetime.now()
    penalty: int | None = None
    if user.awaiting_ping:
        penalty = punish(user, penalty_xp, moment)
    user.awaiting_ping = True
    user.last_ping_at = moment
    return penalty


def acknowledge_reminder(user: User) -> bool:
    was_pending = user.awaiting_ping
    user.awaiting_ping = False
    return was_pending
