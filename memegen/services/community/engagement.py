# memegen/services/community/engagement.py

import json
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ValidationError

from memegen.core.logging import get_logger

logger = get_logger(__name__)


class EngagementState(BaseModel):
    total_created: int = 0
    current_streak_days: int = 0
    last_created: datetime | None = None
    badges: list[str] = []


def compute_badges(total: int, streak: int, existing: list[str] | None = None) -> list[str]:
    badges = list(existing or [])

    def add(badge: str):
        if badge not in badges:
            badges.append(badge)

    if streak >= 5:
        add("Made memes 5 days in a row!")
    if streak >= 10:
        add("Streak Master 🔥")
    if total >= 10:
        add("Certified Dank Lord 🌌")
    if total >= 50:
        add("Meme Machine ⚙️")
    return badges


def record_meme_created(state: EngagementState, now: datetime | None = None) -> EngagementState:
    """
    연속 제작일(streak) 계산
    - 같은 날: 유지 / 다음 날: +1 / 하루 이상 건너뜀: 1로 리셋 / 첫 제작: 1
    """
    now = now or datetime.now()
    streak = state.current_streak_days

    if state.last_created is None:
        streak = 1
    else:
        diff_days = (now.date() - state.last_created.date()).days
        if diff_days == 1:
            streak += 1
        elif diff_days > 1:
            streak = 1

    total = state.total_created + 1
    return EngagementState(
        total_created=total,
        current_streak_days=streak,
        last_created=now,
        badges=compute_badges(total, streak, state.badges),
    )


class EngagementTracker:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> EngagementState:
        if not self.path.exists():
            return EngagementState()
        try:
            return EngagementState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, json.JSONDecodeError) as e:
            logger.warning("engagement file unreadable, resetting: %s", e)
            return EngagementState()

    def record(self, now: datetime | None = None) -> EngagementState:
        state = record_meme_created(self.load(), now)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(state.model_dump_json(indent=2), encoding="utf-8")
        return state
