from __future__ import annotations

from typing import NamedTuple

from .progression.quests import APPLY, CHECK_IN_DONE, PROJECT, RECRUITER, RESUME, STUDY


class ButtonSpec(NamedTuple):
    label: str
    token: str


Menu = tuple[tuple[ButtonSpec, ...], ...]

PROFILE = "profile"
QUESTS = "quests"
LOG = "log"
LOG_FULL = "log_full"
NOTES = "notes"
ADD_NOTE = "add_note"
CANCEL_NOTE = "cancel_note"
BACK = "back"
PING_DOING = "ping_doing"
PING_NOTHING = "ping_nothing"
PING_DONE = CHECK_IN_DONE.token

EMPTY_MENU: Menu = ()

_BACK_ROW = (ButtonSpec("⬅️ Back", BACK),)


def main_menu() -> Menu:
    return (
        (ButtonSpec("👤 Profile", PROFILE), ButtonSpec("📜 Quests", QUESTS)),
        (ButtonSpec("📖 Log", LOG), ButtonSpec("🗒 Notes", NOTES)),
    )


def quest_menu() -> Menu:
    return (
        (ButtonSpec(APPLY.label, APPLY.token), ButtonSpec(STUDY.label, STUDY.token)),
        (ButtonSpec(RESUME.label, RESUME.token), ButtonSpec(RECRUITER.label, RECRUITER.token)),
        (ButtonSpec(PROJECT.label, PROJECT.token),),
        _BACK_ROW,
    )


def notes_menu() -> Menu:
    return (
        (ButtonSpec("➕ Add note", ADD_NOTE),),
        _BACK_ROW,
    )


def note_entry_menu() -> Menu:
    return ((ButtonSpec("✖️ Cancel", CANCEL_NOTE),),)


def log_menu(has_more: bool) -> Menu:
    if not has_more:
        return main_menu()
    return ((ButtonSpec("📜 Full log", LOG_FULL),), _BACK_ROW)


def reminder_menu() -> Menu:
    return ((ButtonSpec("🔥 Doing", PING_DOING), ButtonSpec("😴 Nothing", PING_NOTHING)),)


def follow_up_menu() -> Menu:
    return ((ButtonSpec(CHECK_IN_DONE.label, PING_DONE),),)


def all_buttons() -> list[ButtonSpec]:
    """Every button the bot can render, one per token."""
    seen: dict[str, ButtonSpec] = {}
    menus = (
        main_menu(),
        quest_menu(),
        notes_menu(),
        note_entry_menu(),
        log_menu(True),
        reminder_menu(),
        follow_up_menu(),
    )
    for menu in menus:
        for row in menu:
            for button in row:
                seen.setdefault(button.token, button)
    return list(seen.values())
