# core/stats/__init__.py
from .reading import (
    DayBucket, WeekTotal, per_day_buckets, chunk_weeks, heat_level, week_key,
    weekly_totals, reading_streak_heuristic, filter_shelf, sort_entries,
    library_summary, session_totals, utc_today, progress_percentage, days_to_goal,
)

__all__ = [
    'DayBucket',
    'WeekTotal',
    'per_day_buckets',
    'chunk_weeks',
    'heat_level',
    'week_key',
    'weekly_totals',
    'reading_streak_heuristic',
    'filter_shelf',
    'sort_entries',
    'library_summary',
    'session_totals',
    'utc_today',
    'progress_percentage',
    'days_to_goal',
]
