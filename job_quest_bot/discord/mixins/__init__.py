from .interaction_mixin import InteractionMixin
from .message_mixin import MessageMixin
from .reminder_mixin import ReminderMixin

__all__ = [
    "InteractionMixin",
    "MessageMixin",
    "ReminderMixin",
]
