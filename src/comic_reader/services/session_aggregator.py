"""Session Aggregator - Reading statistics derived from finished sessions."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from comic_reader.core import ReadingSession

TREND_INCREASING = "increasing"
TREND_DECREASING = "decreasing"
TREND_FLAT = "flat"


@dataclass(frozen=True)
class ReadingStats:
    """Statistics over a reader's finished sessions."""

    total_reading_minutes: float = 0.0
    session_count: int = 0
    average_session_duration: float = 0.0
    pages_per_session_avg: float = 0.0
    reading_speed_pages_per_minute: float = 0.0
    streak_days: int = 0
    velocity_trend: str = TREND_FLAT
    velocity_change_percent: float = 0.0


def _local_date(moment: datetime) -> date:
    # Aware timestamps are compared on the reader's local calendar
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def _mean(values: List[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def reading_streak(sessions: Iterable[ReadingSession], today: Optional[date] = None) -> int:
    """Count consecutive days with a session start, walking back from today.

    A day without any session breaks the walk, so no session today means 0.
    """
    today = today or date.today()
    days = {_local_date(session.started_at) for session in sessions}
    streak = 0
    day = today
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def velocity(sessions: List[ReadingSession]) -> tuple[str, float]:
    """Compare pages read in the recent half of sessions against the earlier half.

    Sessions are ordered by start time. With an odd count the middle session
    belongs to the recent half. Returns the trend label and the absolute
    change of the mean in percent of the earlier mean.
    """
    ordered = sorted(sessions, key=lambda s: s.started_at)
    if len(ordered) < 2:
        return TREND_FLAT, 0.0

    split = len(ordered) // 2
    earlier_mean = _mean([s.pages_read for s in ordered[:split]])
    recent_mean = _mean([s.pages_read for s in ordered[split:]])

    change = abs(recent_mean - earlier_mean) / earlier_mean * 100 if earlier_mean else 0.0
    if recent_mean > earlier_mean:
        return TREND_INCREASING, change
    if recent_mean < earlier_mean:
        return TREND_DECREASING, change
    return TREND_FLAT, 0.0


def aggregate(sessions: Iterable[ReadingSession], today: Optional[date] = None) -> ReadingStats:
    """Compute reading statistics, ignoring sessions that are still active."""
    finished = [session for session in sessions if not session.is_active]
    if not finished:
        return ReadingStats()

    count = len(finished)
    total_minutes = float(sum(session.duration_minutes for session in finished))
    total_pages = sum(session.pages_read for session in finished)
    trend, change = velocity(finished)

    return ReadingStats(
        total_reading_minutes=total_minutes,
        session_count=count,
        average_session_duration=total_minutes / count,
        pages_per_session_avg=total_pages / count,
        reading_speed_pages_per_minute=total_pages / total_minutes if total_minutes > 0 else 0.0,
        streak_days=reading_streak(finished, today),
        velocity_trend=trend,
        velocity_change_percent=round(change, 2),
    )


def format_duration(minutes: float) -> str:
    """Render minutes as ``45m``, ``2h`` or ``1h 30m``."""
    if minutes < 60:
        return f"{round(minutes)}m"
    hours = int(minutes // 60)
    remaining = round(minutes % 60)
    if remaining == 60:
        hours, remaining = hours + 1, 0
    return f"{hours}h {remaining}m" if remaining > 0 else f"{hours}h"
