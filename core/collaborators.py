# core/collaborators.py
"""Interfaces the workflow and status manager call out to.

The SQLAlchemy repositories and the Google Books client implement these; tests
substitute mocks.
"""
from typing import Any, Dict, List, Optional, Protocol

from core.models.library import (
    LibraryEntry, NewLibraryEntry, NewReadingSession, ReadingSession, SearchCandidate
)


class SearchProvider(Protocol):
    def search(self, query: str, max_results: int) -> List[SearchCandidate]: ...


class LibraryStore(Protocol):
    def create_entry(self, entry: NewLibraryEntry) -> LibraryEntry: ...

    def update_entry(self, entry_id: int, fields: Dict[str, Any]) -> LibraryEntry: ...

    def delete_entry(self, entry_id: int) -> None: ...

    def list_entries(self, user_id: Optional[int] = None, status: Optional[str] = None) -> List[LibraryEntry]: ...


class SessionLog(Protocol):
    def create_session(self, session: NewReadingSession) -> ReadingSession: ...
