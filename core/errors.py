# core/errors.py
from typing import Any, Optional


class ShelfError(Exception):
    """Base class for errors raised by the library core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShelfError):
    """A request was rejected before any state changed."""


class NetworkError(ShelfError):
    """The search provider could not be reached or returned garbage."""


class PersistenceError(ShelfError):
    """A create/update/delete/list call against the store failed."""


class DuplicateSignal(ShelfError):
    """Not a failure: the book is already in the library.

    Carries the existing entry so callers can offer a status change instead.
    """

    def __init__(self, existing: Any, message: Optional[str] = None):
        super().__init__(message or "This book already exists in your library")
        self.existing = existing


class EntryNotFound(PersistenceError):
    """The store has no row with the requested id."""
