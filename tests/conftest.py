"""Shared fixtures: fixed clock, seeded randomness and a sample activity history."""

import itertools
import random
from datetime import date, datetime, timedelta

import pytest
import pytz

from dailyinsight.config import InsightSettings
from dailyinsight.core.models import ActivityHistory, DailyStats, Session, StreakData, Task
from dailyinsight.services.report_generator import ReportGenerator
from dailyinsight.services.report_service import ReportService

TZ = pytz.timezone("Europe/Moscow")

# Monday; the fixed clock below is in the following week
SAMPLE_WEEK_START = date(2025, 6, 9)


def at(year, month, day, hour=10, minute=0):
    return TZ.localize(datetime(year, month, day, hour, minute))


class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def sequential_ids(prefix="id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def focus_session(session_id, started_at, minutes=25, completed=True, interrupted=False):
    return Session(
        session_id=session_id,
        session_type="focus",
        started_at=started_at,
        actual_duration=minutes,
        completed_at=started_at + timedelta(minutes=minutes) if completed else None,
        was_interrupted=interrupted,
    )


def build_week(week_start, planned=4, completed=3, energy=4, sessions_per_day=2, minutes=25):
    """A week where every day has the same stats and focus sessions at 09:00, 10:00, ..."""
    stats, sessions = [], []
    for offset in range(7):
        day = week_start + timedelta(days=offset)
        stats.append(DailyStats(
            date=day,
            tasks_planned=planned,
            tasks_completed=completed,
            pomodoros_completed=sessions_per_day,
            energy_level=energy,
        ))
        for n in range(sessions_per_day):
            sessions.append(focus_session(
                f"s-{day.isoformat()}-{n}", at(day.year, day.month, day.day, 9 + n), minutes=minutes))
    return stats, sessions


@pytest.fixture
def clock():
    # Wednesday of the week after the sample week
    return FixedClock(at(2025, 6, 18, 12))


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def ids():
    return sequential_ids()


@pytest.fixture
def settings(tmp_path):
    return InsightSettings(
        ENVIRONMENT="testing",
        LOG_TO_FILE=False,
        LOGS_DIR=tmp_path / "logs",
        EXPORT_DIR=tmp_path / "exports",
    )


@pytest.fixture
def sample_history():
    stats, sessions = build_week(SAMPLE_WEEK_START)
    return ActivityHistory(
        tasks=[],
        sessions=sessions,
        daily_stats=stats,
        streaks=StreakData(current_streak=7, longest_streak=7),
    )


@pytest.fixture
def empty_history():
    return ActivityHistory()


@pytest.fixture
def generator(sample_history, clock, rng, ids):
    return ReportGenerator(sample_history, clock=clock, rng=rng, id_factory=ids, timezone=TZ)


@pytest.fixture
def service(generator, settings, clock):
    return ReportService(generator, settings=settings, clock=clock)


@pytest.fixture
def make_task():
    counter = itertools.count(1)

    def factory(**overrides):
        n = next(counter)
        data = {
            "task_id": f"task-{n}",
            "title": f"Задача {n}",
            "estimated_duration": 30,
            "priority": "medium",
            "category": "",
            "created_at": at(2025, 6, 1),
        }
        data.update(overrides)
        return Task(**data)

    return factory
