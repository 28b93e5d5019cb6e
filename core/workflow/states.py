# core/workflow/states.py
"""States of the add-book workflow.

Each state is an immutable value. Transitions in ``transitions.py`` take a state
and return the next one.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from core.models.library import LibraryEntry, ReadingStatus, SearchCandidate


@dataclass(frozen=True)
class Idle:
    error: Optional[str] = None


@dataclass(frozen=True)
class Searching:
    query: str


@dataclass(frozen=True)
class ResultsShown:
    query: str
    results: Tuple[SearchCandidate, ...]


@dataclass(frozen=True)
class StatusSelection:
    candidate: SearchCandidate


@dataclass(frozen=True)
class RatingReview:
    candidate: SearchCandidate


# Interactive states a failed save returns to
ResumeState = Union[StatusSelection, RatingReview]


@dataclass(frozen=True)
class Persisting:
    candidate: SearchCandidate
    status: ReadingStatus
    rating: Optional[float]
    review: Optional[str]
    resume: ResumeState


@dataclass(frozen=True)
class DuplicateBlocked:
    existing: LibraryEntry
    candidate: SearchCandidate


@dataclass(frozen=True)
class Done:
    entry: LibraryEntry


@dataclass(frozen=True)
class Failed:
    error_kind: str
    message: str
    pending: Persisting


WorkflowState = Union[
    Idle, Searching, ResultsShown, StatusSelection, RatingReview,
    Persisting, DuplicateBlocked, Done, Failed,
]
