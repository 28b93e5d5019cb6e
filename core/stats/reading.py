# core/stats/reading.py
"""Reading progress aggregation.

Everything here is a pure function of its inputs. Sessions and entries can be
the pydantic models from ``core.models.library``, ORM rows, or plain dicts.
"""
import math
from collections import defaultdict
from datetime import date, datetime, timedelta, UTC
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from core import config
from core.errors import ValidationError
from core.models.library import ReadingStatus

SHELVES = [status.value for status in ReadingStatus]
SORT_KEYS = ('recent', 'title', 'rating')

# Upper bounds (exclusive) in minutes for heatmap levels 1-3; level 4 is anything above
HEAT_THRESHOLDS = (15, 30, 60)


class DayBucket(NamedTuple):
    date: date
    minutes: int


class WeekTotal(NamedTuple):
    year: int
    week: int
    minutes: int

    @property
    def label(self) -> str:
        return f"{self.year}-W{self.week}"


def _get(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _as_utc(value: Any) -> Optional[datetime]:
    """Naive timestamps come back from SQLite and are UTC."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _status(entry: Any) -> str:
    status = _get(entry, 'status')
    return getattr(status, 'value', status) or ''


def utc_today() -> date:
    """Today's date in UTC, the clock timestamps are stored in."""
    return datetime.now(UTC).date()


def per_day_buckets(sessions: Iterable[Any], window_days: int = config.HEATMAP_WINDOW_DAYS,
                    today: Optional[date] = None) -> List[DayBucket]:
    """Minutes read per calendar day over the last ``window_days`` days.

    Returns exactly ``window_days`` buckets, oldest first, ending on ``today``
    (the UTC date by default). Days without sessions are present with 0
    minutes; sessions outside the window are ignored.
    """
    if window_days < 1:
        raise ValidationError("window_days must be at least 1")
    today = today or utc_today()
    start = today - timedelta(days=window_days - 1)

    totals: Dict[date, int] = {start + timedelta(days=i): 0 for i in range(window_days)}
    for session in sessions:
        day = _as_date(_get(session, 'date'))
        if day in totals:
            totals[day] += _get(session, 'minutes') or 0

    return [DayBucket(day, minutes) for day, minutes in totals.items()]


def chunk_weeks(buckets: Sequence[DayBucket], size: int = 7) -> List[List[DayBucket]]:
    """Split day buckets into heatmap columns of ``size`` days; the last may be short."""
    return [list(buckets[i:i + size]) for i in range(0, len(buckets), size)]


def heat_level(minutes: Optional[int]) -> int:
    """Heatmap intensity from 0 (nothing read) to 4 (an hour or more)."""
    if not minutes or minutes <= 0:
        return 0
    for level, upper in enumerate(HEAT_THRESHOLDS, start=1):
        if minutes < upper:
            return level
    return len(HEAT_THRESHOLDS) + 1


def week_key(day: date) -> Tuple[int, int]:
    """(year, week of year) where week 1 is the Sunday-started week holding Jan 1."""
    jan_first = date(day.year, 1, 1)
    jan_first_weekday = (jan_first.weekday() + 1) % 7  # Sunday = 0
    day_of_year = day.timetuple().tm_yday
    return day.year, math.ceil((day_of_year + jan_first_weekday) / 7)


def weekly_totals(sessions: Iterable[Any], recent_weeks_limit: int = config.WEEKLY_TOTALS_LIMIT) -> List[WeekTotal]:
    """Minutes per week for the most recent ``recent_weeks_limit`` weeks with sessions.

    Weeks are returned oldest first.
    """
    totals: Dict[Tuple[int, int], int] = defaultdict(int)
    for session in sessions:
        day = _as_date(_get(session, 'date'))
        if day is None:
            continue
        totals[week_key(day)] += _get(session, 'minutes') or 0

    if recent_weeks_limit <= 0:
        return []
    recent = sorted(totals)[-recent_weeks_limit:]
    return [WeekTotal(year, week, totals[(year, week)]) for year, week in recent]


def reading_streak_heuristic(entries: Iterable[Any], now: Optional[datetime] = None,
                             window_days: int = config.STREAK_WINDOW_DAYS) -> int:
    """Approximate "books recently read".

    If the most recently added finished book was added within ``window_days``
    days, the streak is the total number of finished books; otherwise 0. This is
    not a count of consecutive reading days.
    """
    now = _as_utc(now) or datetime.now(UTC)
    finished = [_as_utc(_get(e, 'created_at')) for e in entries if _status(e) == ReadingStatus.READ.value]
    finished = sorted((ts for ts in finished if ts is not None), reverse=True)
    if not finished:
        return 0
    days_since = math.floor((now - finished[0]).total_seconds() / 86400)
    return len(finished) if days_since <= window_days else 0


def filter_shelf(entries: Iterable[Any], shelf: str = 'all') -> List[Any]:
    if shelf == 'all':
        return list(entries)
    if shelf not in SHELVES:
        raise ValidationError(f"Unknown shelf '{shelf}'")
    return [e for e in entries if _status(e) == shelf]


def sort_entries(entries: Iterable[Any], sort_by: str = 'recent') -> List[Any]:
    """Order entries for display: recent (newest first), title (A-Z) or rating (best first)."""
    entries = list(entries)
    if sort_by == 'title':
        return sorted(entries, key=lambda e: (_get(e, 'title') or '').lower())
    if sort_by == 'rating':
        return sorted(entries, key=lambda e: _get(e, 'rating') or 0, reverse=True)
    if sort_by == 'recent':
        oldest = datetime.min.replace(tzinfo=UTC)
        return sorted(entries, key=lambda e: _as_utc(_get(e, 'created_at')) or oldest, reverse=True)
    raise ValidationError(f"Unknown sort '{sort_by}'. Choose one of: {', '.join(SORT_KEYS)}")


def library_summary(entries: Iterable[Any], now: Optional[datetime] = None) -> dict:
    """Shelf counts and headline numbers for a user's library.

    Args:
        entries: Library entries
        now: Reference time for "this month" and the streak (default: now, UTC)

    Returns:
        Dictionary of shelf counts, rating stats, books added this month and streak
    """
    entries = list(entries)
    now = _as_utc(now) or datetime.now(UTC)
    rated = [_get(e, 'rating') for e in entries if _get(e, 'rating') is not None]

    added_this_month = 0
    for entry in entries:
        created = _as_utc(_get(entry, 'created_at'))
        if created and created.year == now.year and created.month == now.month:
            added_this_month += 1

    shelf_counts = {'all': len(entries)}
    for shelf in SHELVES:
        shelf_counts[shelf] = sum(1 for e in entries if _status(e) == shelf)

    return {
        "shelf_counts": shelf_counts,
        "currently_reading": shelf_counts[ReadingStatus.READING.value],
        "rated_count": len(rated),
        "average_rating": round(sum(rated) / len(rated), 1) if rated else 0,
        "books_this_month": added_this_month,
        "reading_streak": reading_streak_heuristic(entries, now=now),
    }


def session_totals(sessions: Iterable[Any]) -> dict:
    """Total minutes, pages and distinct reading days across sessions"""
    minutes = pages = 0
    days = set()
    for session in sessions:
        minutes += _get(session, 'minutes') or 0
        pages += _get(session, 'pages') or 0
        day = _as_date(_get(session, 'date'))
        if day is not None:
            days.add(day)
    return {"total_minutes": minutes, "total_pages": pages, "reading_days": len(days)}


def progress_percentage(current_page: Optional[int], total_pages: Optional[int]) -> int:
    """Whole-percent completion, capped at 100. Unknown or zero length gives 0."""
    if not total_pages or total_pages <= 0:
        return 0
    percent = math.floor((current_page or 0) / total_pages * 100 + 0.5)
    return max(0, min(100, percent))


def days_to_goal(goal_date: Any, today: Optional[date] = None) -> Optional[int]:
    """Whole days until the goal date (UTC today by default); negative once it has passed."""
    goal = _as_date(goal_date)
    if goal is None:
        return None
    return (goal - (today or utc_today())).days
