# core/workflow/transitions.py
"""Pure transition functions for the add-book workflow.

None of these perform I/O. Each either returns the next state or raises
ValidationError, in which case the caller keeps the state it had.
"""
from typing import Iterable, Optional, Sequence, Union

from core.duplicates import find_duplicate
from core.errors import DuplicateSignal, ValidationError
from core.models.library import LibraryEntry, ReadingStatus, SearchCandidate
from core.ratings import UI_MAX, ui_to_storage
from core.status import parse_status
from core.workflow.states import (
    Done, DuplicateBlocked, Failed, Idle, Persisting, RatingReview,
    ResultsShown, Searching, StatusSelection, WorkflowState,
)

PERSISTENCE_ERROR = "persistence"


def _expect(state: WorkflowState, *allowed: type, action: str) -> None:
    if not isinstance(state, allowed):
        raise ValidationError(f"Cannot {action} while {type(state).__name__}")


def start_search(state: WorkflowState, query: str) -> Searching:
    _expect(state, Idle, ResultsShown, action="search")
    term = (query or "").strip()
    if not term:
        raise ValidationError("Enter a title or author to search for")
    return Searching(query=term)


def search_succeeded(state: WorkflowState, results: Sequence[SearchCandidate]) -> ResultsShown:
    _expect(state, Searching, action="show results")
    return ResultsShown(query=state.query, results=tuple(results))


def search_failed(state: WorkflowState, message: str) -> Idle:
    _expect(state, Searching, action="fail a search")
    return Idle(error=message)


def select_candidate(state: WorkflowState, choice: Union[int, SearchCandidate]) -> StatusSelection:
    """Pick a result by position or by value."""
    _expect(state, ResultsShown, action="select a book")
    if isinstance(choice, SearchCandidate):
        return StatusSelection(candidate=choice)
    if not 0 <= choice < len(state.results):
        raise ValidationError(f"No search result number {choice + 1}")
    return StatusSelection(candidate=state.results[choice])


def choose_status(state: WorkflowState, status: Union[str, ReadingStatus]) -> Union[RatingReview, Persisting]:
    """Finished books go through rating/review first; other shelves save directly."""
    _expect(state, StatusSelection, action="choose a status")
    chosen = parse_status(status)
    if chosen is ReadingStatus.READ:
        return RatingReview(candidate=state.candidate)
    return Persisting(candidate=state.candidate, status=chosen, rating=None, review=None, resume=state)


def submit_rating(state: WorkflowState, rating: Optional[float] = None, review: Optional[str] = None) -> Persisting:
    """Carry a 0-5 star rating and optional review into the save step.

    A zero or missing rating is stored as no rating; a blank review as no review.
    """
    _expect(state, RatingReview, action="submit a rating")
    if rating is not None and not 0 <= rating <= UI_MAX:
        raise ValidationError(f"Rating must be between 0 and {UI_MAX} stars")
    stored = ui_to_storage(rating) if rating else None
    cleaned = (review or "").strip() or None
    return Persisting(
        candidate=state.candidate,
        status=ReadingStatus.READ,
        rating=stored,
        review=cleaned,
        resume=state,
    )


def check_duplicate(state: Persisting, library: Iterable[LibraryEntry]) -> None:
    """Raise DuplicateSignal if the candidate is already in the library."""
    existing = find_duplicate(library, state.candidate.title, state.candidate.primary_author)
    if existing is not None:
        raise DuplicateSignal(existing)


def duplicate_found(state: WorkflowState, existing: LibraryEntry) -> DuplicateBlocked:
    _expect(state, Persisting, action="block a duplicate")
    return DuplicateBlocked(existing=existing, candidate=state.candidate)


def persisted(state: WorkflowState, entry: LibraryEntry) -> Done:
    _expect(state, Persisting, action="finish saving")
    return Done(entry=entry)


def persist_failed(state: WorkflowState, message: str) -> Failed:
    _expect(state, Persisting, action="fail a save")
    return Failed(error_kind=PERSISTENCE_ERROR, message=message, pending=state)


def retry(state: WorkflowState) -> Persisting:
    _expect(state, Failed, action="retry")
    return state.pending


def acknowledge(state: WorkflowState) -> WorkflowState:
    """Dismiss an outcome. A failed save returns to the screen it came from."""
    _expect(state, DuplicateBlocked, Done, Failed, action="acknowledge")
    if isinstance(state, Failed):
        return state.pending.resume
    return Idle()


def cancel(state: WorkflowState) -> Idle:
    """Drop everything pending. A save already under way cannot be cancelled."""
    if isinstance(state, Persisting):
        raise ValidationError("Cannot cancel while the book is being saved")
    return Idle()
