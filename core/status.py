# core/status.py
import logging
from typing import Dict, FrozenSet, Optional, Union

from core.collaborators import LibraryStore
from core.errors import ValidationError
from core.models.library import LibraryEntry, ReadingStatus
from core.ratings import UI_MAX, ui_to_storage

logger = logging.getLogger(__name__)

# Every shelf can currently move to every other shelf.
ALLOWED_TRANSITIONS: Dict[ReadingStatus, FrozenSet[ReadingStatus]] = {
    ReadingStatus.TO_READ: frozenset(ReadingStatus),
    ReadingStatus.READING: frozenset(ReadingStatus),
    ReadingStatus.READ: frozenset(ReadingStatus),
}


def parse_status(value: Union[str, ReadingStatus]) -> ReadingStatus:
    """Coerce a user-supplied status, raising ValidationError for unknown shelves."""
    try:
        return ReadingStatus(value)
    except ValueError:
        choices = ", ".join(s.value for s in ReadingStatus)
        raise ValidationError(f"Unknown status '{value}'. Choose one of: {choices}")


def can_transition(current: ReadingStatus, new: ReadingStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class StatusTransitionManager:
    """Moves existing library entries between shelves and sets their ratings."""

    def __init__(self, store: LibraryStore):
        self.store = store

    def transition(self, entry: LibraryEntry, new_status: Union[str, ReadingStatus]) -> LibraryEntry:
        """
        Move an entry to another shelf.

        Args:
            entry: The entry to move
            new_status: Target status

        Returns:
            The updated entry as returned by the store

        Raises:
            ValidationError: Unknown status or a disallowed edge
            PersistenceError: The store update failed
        """
        target = parse_status(new_status)
        if not can_transition(entry.status, target):
            raise ValidationError(
                f"Cannot move '{entry.title}' from {entry.status.value} to {target.value}"
            )
        updated = self.store.update_entry(entry.id, {'status': target})
        logger.info("Moved entry %s from %s to %s", entry.id, entry.status.value, target.value)
        return updated

    def set_rating(self, entry: LibraryEntry, ui_stars: Optional[float]) -> LibraryEntry:
        """Rate an entry on the 0-5 star scale. None clears the rating."""
        if ui_stars is not None and not 0 <= ui_stars <= UI_MAX:
            raise ValidationError(f"Rating must be between 0 and {UI_MAX} stars")
        return self.store.update_entry(entry.id, {'rating': ui_to_storage(ui_stars)})

    def remove(self, entry: LibraryEntry) -> None:
        self.store.delete_entry(entry.id)
        logger.info("Removed '%s' from the library", entry.title)
