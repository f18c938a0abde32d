from datetime import UTC, datetime, timedelta

import pytest

from wrestlequest.kb import PROGRESSION_CONFIG, SKILL_ACTIVITIES, default_progress
from wrestlequest.models.enums import LevelPolicy
from wrestlequest.models.kb import ProgressionConfig
from wrestlequest.models.user import UserProgress
from wrestlequest.storage.base import StorageError
from wrestlequest.storage.memory import InMemoryStorage


# ── Skill indexes ────────────────────────────────────────────────────

TECHNIQUE = 0
STRENGTH = 1
ENDURANCE = 2
MINDSET = 4
FLEXIBILITY = 6

DAY1 = datetime(2026, 3, 2, 18, 0, tzinfo=UTC)


# ── Config Fixtures ──────────────────────────────────────────────────


@pytest.fixture
def config() -> ProgressionConfig:
    return PROGRESSION_CONFIG


@pytest.fixture
def incremental_config() -> ProgressionConfig:
    return ProgressionConfig(level_policy=LevelPolicy.INCREMENTAL)


@pytest.fixture
def catalog():
    return SKILL_ACTIVITIES


# ── Progress Fixtures ────────────────────────────────────────────────


@pytest.fixture
def fresh_progress() -> UserProgress:
    return default_progress()


def make_progress(
    skill_index: int = TECHNIQUE,
    points: int = 0,
    rank: int = 1,
    total_points: int = 0,
    xp: int = 0,
    level: int = 1,
    last_activity_date: datetime | None = None,
    consecutive_days: int = 0,
) -> UserProgress:
    progress = default_progress()
    skills = list(progress.skills)
    skills[skill_index] = skills[skill_index].model_copy(
        update={"points": points, "rank": rank, "total_points": total_points}
    )
    return progress.model_copy(
        update={
            "skills": skills,
            "xp": xp,
            "level": level,
            "last_activity_date": last_activity_date,
            "consecutive_days": consecutive_days,
        }
    )


def days_after(start: datetime, n: int) -> datetime:
    return start + timedelta(days=n)


# ── Session collaborators ────────────────────────────────────────────


class FakeClock:
    def __init__(self, now: datetime = DAY1):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.now = self.now + timedelta(days=days, hours=hours)


class ManualScheduler:
    """Records deferred jobs by key; run_all() fires them in schedule order."""

    def __init__(self):
        self.jobs: dict[tuple[str, int], object] = {}
        self.delays: dict[tuple[str, int], float] = {}

    def schedule(self, user_id, skill_index, delay_seconds, func):
        self.jobs[(user_id, skill_index)] = func
        self.delays[(user_id, skill_index)] = delay_seconds

    def cancel(self, user_id, skill_index):
        return self.jobs.pop((user_id, skill_index), None) is not None

    def run_all(self):
        jobs, self.jobs = self.jobs, {}
        return [func() for func in jobs.values()]


class FlakyStorage(InMemoryStorage):
    """In-memory store whose writes fail while `failing` is set."""

    def __init__(self):
        super().__init__()
        self.failing = False
        self.save_calls = 0

    def save_user_progress(self, user_id, progress):
        self.save_calls += 1
        if self.failing:
            raise StorageError("store unavailable", user_id=user_id)
        return super().save_user_progress(user_id, progress)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def storage() -> FlakyStorage:
    return FlakyStorage()


