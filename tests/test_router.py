from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from job_quest_bot import menus  # noqa: E402
from job_quest_bot.progression import QUESTS, InputMode, User  # noqa: E402
from job_quest_bot.router import FollowUp, InteractionRouter, reminder_prompt  # noqa: E402

NOW = datetime(2026, 5, 1, 12, 0)


def _router(limit: int = 10) -> InteractionRouter:
    return InteractionRouter(log_display_limit=limit, clock=lambda: NOW)


def _tokens(menu: menus.Menu) -> list[str]:
    return [button.token for row in menu for button in row]


def test_start_shows_main_menu() -> None:
    reply = _router().start(User())

    assert "MMORPG" in reply.text
    assert _tokens(reply.menu) == ["profile", "quests", "log", "notes"]


def test_profile_shows_progress() -> None:
    reply = _router().handle_token(User(level=2, xp=30, gold=4), "profile")

    assert reply is not None
    assert "Level: 2" in reply.text
    assert "XP: 30 / 200" in reply.text
    assert "Gold: 4" in reply.text


@pytest.mark.parametrize(
    ("token", "xp", "gold"),
    [
        ("q_apply", 20, 1),
        ("q_study", 15, 0),
        ("q_resume", 30, 0),
        ("q_recruiter", 25, 1),
        ("q_project", 50, 0),
    ],
)
def test_quest_catalog_rewards(token: str, xp: int, gold: int) -> None:
    user = User()

    reply = _router().handle_token(user, token)

    assert reply is not None
    assert (user.xp, user.gold) == (xp, gold)
    assert f"+{xp} XP" in reply.text
    assert ("gold" in reply.text) is (gold > 0)
    assert reply.menu == menus.quest_menu()


def test_quest_reply_announces_level_up() -> None:
    user = User(xp=90)

    reply = _router().handle_token(user, "q_project")

    assert reply is not None
    assert user.level == 2
    assert "New level 2" in reply.text


def test_quest_menu_lists_every_quest() -> None:
    reply = _router().handle_token(User(), "quests")

    assert reply is not None
    tokens = _tokens(reply.menu)
    assert [quest.token for quest in QUESTS] == tokens[:5]
    assert tokens[-1] == "back"


def test_log_view_truncates_to_display_limit() -> None:
    user = User(log=[f"entry {i}" for i in range(5)])

    short = _router(limit=3).handle_token(user, "log")
    full = _router(limit=3).handle_token(user, "log_full")

    assert short is not None and full is not None
    assert "entry 2" in short.text and "entry 3" not in short.text
    assert "log_full" in _tokens(short.menu)
    assert all(f"entry {i}" in full.text for i in range(5))
    assert len(user.log) == 5


def test_log_view_without_overflow_uses_main_menu() -> None:
    reply = _router().handle_token(User(), "log")

    assert reply is not None
    assert "No entries yet." in reply.text
    assert reply.menu == menus.main_menu()


def test_note_flow() -> None:
    router = _router()
    user = User()

    assert router.handle_text(user, "ignored while idle") is None

    armed = router.handle_token(user, "add_note")
    assert armed is not None
    assert user.input_mode is InputMode.ADD_NOTE
    assert _tokens(armed.menu) == ["cancel_note"]

    assert router.handle_text(user, "   ") is None
    assert user.input_mode is InputMode.ADD_NOTE

    saved = router.handle_text(user, "  follow up with Acme  ")
    assert saved is not None
    assert saved.text == "✅ Note saved"
    assert user.notes == ["  follow up with Acme  "]
    assert user.log == ["01.05 12:00 - 📝 Note created"]
    assert user.input_mode is InputMode.NONE

    notes = router.handle_token(user, "notes")
    assert notes is not None
    assert "follow up with Acme" in notes.text


def test_cancel_note_disarms_input_mode() -> None:
    user = User(input_mode=InputMode.ADD_NOTE)

    reply = _router().handle_token(user, "cancel_note")

    assert reply is not None
    assert user.input_mode is InputMode.NONE
    assert user.notes == []


def test_unknown_token_is_ignored() -> None:
    user = User()

    assert _router().handle_token(user, "definitely-not-a-button") is None
    assert user == User()


def test_back_returns_main_menu() -> None:
    reply = _router().handle_token(User(), "back")

    assert reply is not None
    assert reply.menu == menus.main_menu()


def test_ping_doing_clears_pending_check_in() -> None:
    user = User(awaiting_ping=True)

    reply = _router().handle_token(user, "ping_doing")

    assert reply is not None
    assert user.awaiting_ping is False
    assert reply.follow_up is FollowUp.CANCEL
    assert "working on it" in user.log[0]


def test_ping_nothing_schedules_follow_up_and_keeps_debt() -> None:
    user = User(awaiting_ping=True)

    reply = _router().handle_token(user, "ping_nothing")

    assert reply is not None
    assert user.awaiting_ping is True
    assert reply.follow_up is FollowUp.SCHEDULE
    assert reply.menu == menus.EMPTY_MENU


def test_ping_done_grants_reward_once() -> None:
    router = _router()
    user = User(awaiting_ping=True)

    first = router.handle_token(user, "ping_done")
    second = router.handle_token(user, "ping_done")

    assert first is not None and second is not None
    assert user.awaiting_ping is False
    assert user.xp == 10
    assert first.follow_up is FollowUp.CANCEL
    assert "already closed" in second.text


def test_stale_reminder_buttons_do_not_change_progress() -> None:
    router = _router()
    user = User()

    for token in ("ping_doing", "ping_nothing", "ping_done"):
        reply = router.handle_token(user, token)
        assert reply is not None
        assert "already closed" in reply.text
        assert reply.follow_up is not FollowUp.SCHEDULE

    assert user == User()


def test_reminder_prompt_mentions_penalty() -> None:
    assert "-10 XP" in reminder_prompt(10).text
    assert "XP" not in reminder_prompt(None).text
    assert _tokens(reminder_prompt(None).menu) == ["ping_doing", "ping_nothing"]
