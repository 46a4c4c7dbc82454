from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Quest:
    token: str
    label: str
    name: str
    xp: int
    gold: int = 0


APPLY = Quest("q_apply", "💼 Apply", "Apply", 20, 1)
STUDY = Quest("q_study", "🧠 Study", "Study", 15)
RESUME = Quest("q_resume", "📄 Resume", "Resume", 30)
RECRUITER = Quest("q_recruiter", "✉️ Recruiter", "Recruiter", 25, 1)
PROJECT = Quest("q_project", "🛠️ Project", "Project", 50)

QUESTS: tuple[Quest, ...] = (APPLY, STUDY, RESUME, RECRUITER, PROJECT)

# Reward for confirming work after ignoring a reminder with "nothing".
CHECK_IN_DONE = Quest("ping_done", "✅ Done", "Check-in done", 10)

QUESTS_BY_TOKEN: dict[str, Quest] = {quest.token: quest for quest in QUESTS}
