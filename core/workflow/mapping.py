# core/workflow/mapping.py
import re
from datetime import date
from typing import Optional

from core.models.library import EntryType, NewLibraryEntry, ReadingStatus, SearchCandidate

FULL_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
YEAR_MONTH = re.compile(r'^(\d{4})-(\d{2})$')
YEAR = re.compile(r'^\d{4}$')


def normalize_release_date(value: Optional[str]) -> Optional[str]:
    """Turn a loose provider date into YYYY-MM-DD, or None.

    "2020" -> "2020-01-01", "2020-05" -> "2020-05-01", "2020-05-17" unchanged.
    Anything else, including impossible dates like "2020-13", gives None.
    """
    if not value or not isinstance(value, str):
        return None
    trimmed = value.strip()

    if FULL_DATE.match(trimmed):
        candidate = trimmed
    elif YEAR_MONTH.match(trimmed):
        candidate = f"{trimmed}-01"
    elif YEAR.match(trimmed):
        candidate = f"{trimmed}-01-01"
    else:
        return None

    try:
        date.fromisoformat(candidate)
    except ValueError:
        return None
    return candidate


def build_entry(
    candidate: SearchCandidate,
    status: ReadingStatus,
    rating: Optional[float] = None,
    review: Optional[str] = None,
    user_id: Optional[int] = None,
) -> NewLibraryEntry:
    """Map a search candidate plus the user's choices onto a new library entry"""
    return NewLibraryEntry(
        user_id=user_id,
        type=EntryType.BOOK,
        title=candidate.title,
        author=candidate.primary_author,
        cover_image_url=candidate.image or '',
        release_date=normalize_release_date(candidate.published_date),
        overview=candidate.description or '',
        status=status,
        rating=rating,
        review=review,
    )
