# core/workflow/__init__.py
from .add_book import AddBookWorkflow
from .mapping import build_entry, normalize_release_date
from .states import (
    Idle, Searching, ResultsShown, StatusSelection, RatingReview,
    Persisting, DuplicateBlocked, Done, Failed, WorkflowState,
)

__all__ = [
    'AddBookWorkflow',
    'build_entry',
    'normalize_release_date',
    'Idle',
    'Searching',
    'ResultsShown',
    'StatusSelection',
    'RatingReview',
    'Persisting',
    'DuplicateBlocked',
    'Done',
    'Failed',
    'WorkflowState',
]
