"""Practice statistics for repertoire.

Derives the weekly practice chart and the current practice streak from
raw practice session rows. Session volume is small (one person's
practice log), so per-day sums are computed in memory.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from repertoire.db.client import RepertoireClient
from repertoire.db.models import PracticeSession

logger = logging.getLogger(__name__)

CHART_DAYS = 7


@dataclass
class DayBucket:
    """Practice total for one calendar day.

    Attributes:
        label: Short weekday name (e.g. "Mon")
        value: Minutes practiced that day, unrounded
        day: The calendar day
    """

    label: str
    value: float
    day: Optional[date] = None


@dataclass
class PracticeStats:
    """Derived practice statistics.

    Attributes:
        last_seven_days: Daily buckets, oldest first, ending today
        current_streak: Consecutive practiced days ending today (or yesterday)
        total_minutes: Minutes practiced across all sessions
    """

    last_seven_days: list[DayBucket] = field(default_factory=list)
    current_streak: int = 0
    total_minutes: float = 0.0


def session_day(timestamp_ms: int) -> date:
    """Local calendar day containing an epoch-millisecond timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def day_start_ms(day: date) -> int:
    """Epoch milliseconds of local midnight at the start of a day."""
    return int(datetime.combine(day, datetime.min.time()).timestamp() * 1000)


def build_weekly_chart(sessions: Iterable[PracticeSession], today: date, days: int = CHART_DAYS) -> list[DayBucket]:
    """Bucket sessions into per-day minute totals.

    Args:
        sessions: Practice sessions (any range; out-of-window ones are ignored)
        today: Last day of the chart
        days: Number of days to chart

    Returns:
        One bucket per day, oldest first
    """
    seconds_by_day: dict[date, int] = {}
    for session in sessions:
        day = session_day(session.date)
        seconds_by_day[day] = seconds_by_day.get(day, 0) + session.duration_seconds

    buckets = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets.append(DayBucket(label=day.strftime("%a"), value=seconds_by_day.get(day, 0) / 60, day=day))
    return buckets


def count_streak(practiced_days: set[date], today: date) -> int:
    """Count consecutive practiced days walking back from today.

    Today only adds to the streak if practiced; a missing today does not
    break a streak that ran through yesterday.

    Args:
        practiced_days: Days with at least one session
        today: Day to start the walk from

    Returns:
        Streak length in days
    """
    streak = 0
    if today in practiced_days:
        streak += 1

    check_day = today - timedelta(days=1)
    while check_day in practiced_days:
        streak += 1
        check_day -= timedelta(days=1)

    return streak


class StatsService:
    """Computes practice statistics from the repertoire database."""

    def __init__(self, client: RepertoireClient):
        self.client = client

    def get_practice_stats(self, today: Optional[date] = None) -> PracticeStats:
        """Get the weekly chart, current streak and total practice time.

        Args:
            today: Day the chart and streak end on (defaults to the local date)

        Returns:
            PracticeStats; empty buckets and a zero streak if the store
            is unavailable
        """
        if not self.client.is_initialized:
            logger.warning("Database not initialized, returning empty practice stats")
            return PracticeStats()

        today = today or date.today()
        window_start = today - timedelta(days=CHART_DAYS - 1)

        sessions = self.client.get_practice_sessions_since(day_start_ms(window_start))
        practiced_days = {session_day(ts) for ts in self.client.get_practice_dates()}

        stats = PracticeStats(
            last_seven_days=build_weekly_chart(sessions, today),
            current_streak=count_streak(practiced_days, today),
            total_minutes=self.client.get_total_practice_seconds() / 60,
        )
        logger.debug(f"Practice stats: streak={stats.current_streak}, total={stats.total_minutes:.1f} min")
        return stats
