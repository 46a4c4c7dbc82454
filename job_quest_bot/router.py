from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from . import menus
from .menus import Menu
from .progression import (
    CHECK_IN_DONE,
    QUESTS_BY_TOKEN,
    InputMode,
    Quest,
    User,
    acknowledge_reminder,
    add_note,
    append_log,
    complete_quest,
    xp_to_next,
)
from .progression.engine import format_reward

TITLE = "🎮 Job Hunt: the MMORPG"


class FollowUp(str, Enum):
    KEEP = "keep"
    SCHEDULE = "schedule"
    CANCEL = "cancel"


@dataclass(slots=True)
class Reply:
    text: str
    menu: Menu = menus.EMPTY_MENU
    follow_up: FollowUp = FollowUp.KEEP


TextHandler = Callable[[User, str, datetime], Reply]


def reminder_prompt(penalty: int | None) -> Reply:
    text = "⏰ Check-in! What are you doing for your job search right now?"
    if penalty is not None:
        text = f"⚠️ You ignored the last check-in: -{penalty} XP.\n\n{text}"
    return Reply(text, menus.reminder_menu())


def follow_up_prompt() -> Reply:
    return Reply(
        "😠 Seriously? Nothing at all?\nGo send one application or fix one line of your résumé, "
        "then press the button.",
        menus.follow_up_menu(),
    )


def _save_note(user: User, text: str, now: datetime) -> Reply:
    add_note(user, text, now)
    user.input_mode = InputMode.NONE
    return Reply("✅ Note saved", menus.main_menu())


class InteractionRouter:
    """Turns inbound chat events into record mutations and rendered replies.

    The router never touches storage or the transport: callers load the
    record, pass it in, persist it when a reply comes back and render the
    reply. ``None`` means the event is ignored.
    """

    def __init__(
        self,
        *,
        log_display_limit: int = 10,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.log_display_limit = max(1, int(log_display_limit))
        self.clock = clock
        self.text_handlers: dict[InputMode, TextHandler] = {
            InputMode.ADD_NOTE: _save_note,
        }

    def start(self, user: User) -> Reply:
        return Reply(TITLE, menus.main_menu())

    def handle_text(self, user: User, text: str) -> Reply | None:
        if not user.input_mode.expects_text:
            return None
        handler = self.text_handlers.get(user.input_mode)
        if handler is None:
            return None
        if not text.strip():
            return None
        return handler(user, text, self.clock())

    def handle_token(self, user: User, token: str) -> Reply | None:
        quest = QUESTS_BY_TOKEN.get(token)
        if quest is not None:
            return self._quest(user, quest)

        if token == menus.PROFILE:
            return Reply(self._profile_text(user), menus.main_menu())
        if token == menus.QUESTS:
            return Reply("📜 Pick a quest", menus.quest_menu())
        if token == menus.LOG:
            return self._log(user, limit=self.log_display_limit)
        if token == menus.LOG_FULL:
            return self._log(user, limit=None)
        if token == menus.NOTES:
            return Reply(self._notes_text(user), menus.notes_menu())
        if token == menus.ADD_NOTE:
            user.input_mode = InputMode.ADD_NOTE
            return Reply("✍️ Send the note text in one message", menus.note_entry_menu())
        if token == menus.CANCEL_NOTE:
            user.input_mode = InputMode.NONE
            return Reply(self._notes_text(user), menus.notes_menu())
        if token == menus.BACK:
            return Reply("🏠 Main menu", menus.main_menu())
        if token == menus.PING_DOING:
            return self._ping_doing(user)
        if token == menus.PING_NOTHING:
            return self._ping_nothing(user)
        if token == menus.PING_DONE:
            return self._ping_done(user)
        return None

    @staticmethod
    def _profile_text(user: User) -> str:
        lines = [
            f"👤 Level: {user.level}",
            f"XP: {user.xp} / {xp_to_next(user.level)}",
            f"💰 Gold: {user.gold}",
        ]
        if user.awaiting_ping:
            lines.append("⏰ A check-in is waiting for your answer")
        return "\n".join(lines)

    def _log(self, user: User, *, limit: int | None) -> Reply:
        entries = user.log if limit is None else user.log[:limit]
        body = "\n".join(entries) if entries else "No entries yet."
        has_more = limit is not None and len(user.log) > limit
        return Reply(f"📖 Log\n\n{body}", menus.log_menu(has_more))

    @staticmethod
    def _notes_text(user: User) -> str:
        body = "\n".join(user.notes) if user.notes else "No notes yet."
        return f"🗒 Notes\n\n{body}"

    def _quest(self, user: User, quest: Quest, menu: Menu | None = None) -> Reply:
        new_level = complete_quest(user, quest.name, quest.xp, quest.gold, self.clock())
        text = f"✅ {quest.name}\n{format_reward(quest.xp, quest.gold)}"
        if new_level is not None:
            text += f"\n🆙 New level {new_level}"
        return Reply(text, menu if menu is not None else menus.quest_menu())

    def _ping_doing(self, user: User) -> Reply:
        if not acknowledge_reminder(user):
            return self._closed_check_in()
        append_log(user, "🔥 Check-in: working on it", self.clock())
        return Reply("💪 Great, keep it up!", menus.main_menu(), FollowUp.CANCEL)

    def _ping_nothing(self, user: User) -> Reply:
        if not user.awaiting_ping:
            return self._closed_check_in()
        append_log(user, "😴 Check-in: doing nothing", self.clock())
        return Reply("😒 Noted. I will check on you again in a minute.", menus.EMPTY_MENU, FollowUp.SCHEDULE)

    def _ping_done(self, user: User) -> Reply:
        if not acknowledge_reminder(user):
            return self._closed_check_in()
        reply = self._quest(user, CHECK_IN_DONE, menus.main_menu())
        reply.follow_up = FollowUp.CANCEL
        return reply

    @staticmethod
    def _closed_check_in() -> Reply:
        return Reply("👌 This check-in is already closed.", menus.main_menu(), FollowUp.CANCEL)
