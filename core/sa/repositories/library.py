import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import EntryNotFound, PersistenceError
from core.models.library import LibraryEntry, NewLibraryEntry, EntryType
from core.sa.models import MediaEntry

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    'title', 'author', 'cover_image_url', 'release_date',
    'overview', 'status', 'rating', 'review',
}


class LibraryRepository:
    """Repository for library entries.

    This is the persistence side of the add workflow and the status manager: it
    takes and returns ``core.models.library`` objects so nothing above it sees
    SQLAlchemy rows.
    """

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, entry_id: int) -> Optional[LibraryEntry]:
        """Get a library entry by its ID.

        Args:
            entry_id: The ID of the library entry to retrieve

        Returns:
            The LibraryEntry if found, None otherwise
        """
        row = self._get_row(entry_id)
        return LibraryEntry.model_validate(row) if row else None

    def list_entries(self, user_id: Optional[int] = None, status: Optional[str] = None) -> List[LibraryEntry]:
        """List book entries, newest first.

        Args:
            user_id: Only return entries owned by this user
            status: Only return entries on this shelf

        Returns:
            List of LibraryEntry objects
        """
        try:
            query = self.session.query(MediaEntry).filter(MediaEntry.type == EntryType.BOOK.value)
            if user_id is not None:
                query = query.filter(MediaEntry.user_id == user_id)
            if status is not None:
                query = query.filter(MediaEntry.status == _value(status))
            rows = query.order_by(desc(MediaEntry.created_at), desc(MediaEntry.id)).all()
        except SQLAlchemyError as e:
            logger.exception("Failed to list library entries")
            raise PersistenceError(f"Failed to load library: {e}") from e
        return [LibraryEntry.model_validate(row) for row in rows]

    def search_by_title(self, query: str, user_id: Optional[int] = None, limit: Optional[int] = None) -> List[LibraryEntry]:
        """Find books whose title contains ``query`` (case-insensitive), newest first.

        Args:
            query: Part of a title
            user_id: Only search this user's entries
            limit: Maximum number of results (default: all)

        Returns:
            List of matching LibraryEntry objects
        """
        try:
            base_query = self.session.query(MediaEntry).filter(
                MediaEntry.type == EntryType.BOOK.value,
                MediaEntry.title.ilike(f"%{query.strip()}%"),
            )
            if user_id is not None:
                base_query = base_query.filter(MediaEntry.user_id == user_id)
            base_query = base_query.order_by(desc(MediaEntry.created_at), desc(MediaEntry.id))
            if limit is not None:
                base_query = base_query.limit(limit)
            rows = base_query.all()
        except SQLAlchemyError as e:
            logger.exception("Failed to search library titles")
            raise PersistenceError(f"Failed to search library: {e}") from e
        return [LibraryEntry.model_validate(row) for row in rows]

    def create_entry(self, entry: NewLibraryEntry) -> LibraryEntry:
        """Create a new library entry.

        Args:
            entry: Mapped fields for the new entry

        Returns:
            The created LibraryEntry, with its id and timestamps

        Raises:
            PersistenceError: If the insert fails
        """
        row = MediaEntry(
            user_id=entry.user_id,
            type=entry.type.value,
            title=entry.title,
            author=entry.author,
            cover_image_url=entry.cover_image_url,
            release_date=entry.release_date,
            overview=entry.overview,
            status=entry.status.value,
            rating=entry.rating,
            review=entry.review,
        )
        self.session.add(row)
        self._commit(f"Failed to add '{entry.title}'")
        logger.info("Added library entry %s (%s, %s)", row.id, row.title, row.status)
        return LibraryEntry.model_validate(row)

    def update_entry(self, entry_id: int, fields: Dict[str, Any]) -> LibraryEntry:
        """Update an existing library entry.

        Args:
            entry_id: The ID of the library entry to update
            fields: Partial fields to overwrite. Unknown fields are rejected.

        Returns:
            The updated LibraryEntry

        Raises:
            EntryNotFound: If no entry has this ID
            PersistenceError: If the update fails
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise PersistenceError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        row = self._get_row(entry_id)
        if row is None:
            raise EntryNotFound(f"Library entry {entry_id} not found")

        for name, value in fields.items():
            setattr(row, name, _value(value))
        self._commit(f"Failed to update library entry {entry_id}")
        logger.info("Updated library entry %s: %s", entry_id, ", ".join(sorted(fields)))
        return LibraryEntry.model_validate(row)

    def delete_entry(self, entry_id: int) -> None:
        """Delete a library entry.

        Args:
            entry_id: The ID of the library entry to delete

        Raises:
            EntryNotFound: If no entry has this ID
            PersistenceError: If the delete fails
        """
        row = self._get_row(entry_id)
        if row is None:
            raise EntryNotFound(f"Library entry {entry_id} not found")

        self.session.delete(row)
        self._commit(f"Failed to remove library entry {entry_id}")
        logger.info("Removed library entry %s", entry_id)

    def _get_row(self, entry_id: int) -> Optional[MediaEntry]:
        try:
            return self.session.query(MediaEntry).filter(MediaEntry.id == entry_id).one_or_none()
        except SQLAlchemyError as e:
            logger.exception("Failed to load library entry %s", entry_id)
            raise PersistenceError(f"Failed to load library entry {entry_id}: {e}") from e

    def _commit(self, message: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception(message)
            raise PersistenceError(f"{message}: {e}") from e


def _value(value: Any) -> Any:
    """Unwrap enums so rows store plain strings"""
    return getattr(value, 'value', value)
