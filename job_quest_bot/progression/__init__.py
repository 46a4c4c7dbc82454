from .engine import add_note, append_log, complete_quest, punish, trim_history, xp_to_next
from .model import InputMode, User
from .quests import CHECK_IN_DONE, QUESTS, QUESTS_BY_TOKEN, Quest
from .reminders import acknowledge_reminder, issue_reminder

__all__ = [
    "CHECK_IN_DONE",
    "QUESTS",
    "QUESTS_BY_TOKEN",
    "InputMode",
    "Quest",
    "User",
    "acknowledge_reminder",
    "add_note",
    "append_log",
    "complete_quest",
    "issue_reminder",
    "punish",
    "trim_history",
    "xp_to_next",
]
