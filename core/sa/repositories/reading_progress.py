# core/sa/repositories/reading_progress.py
import logging
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import PersistenceError
from core.models.library import ProgressUpdate, ReadingProgress as ReadingProgressModel
from core.sa.models import ReadingProgress

logger = logging.getLogger(__name__)

# Set on insert only; an upsert never moves a row to another user or book
KEY_FIELDS = {'user_id', 'book_id'}


class ReadingProgressRepository:
    """Per-book page progress, keyed on (user_id, book_id)."""

    def __init__(self, session: Session):
        self.session = session

    def upsert_progress(self, update: ProgressUpdate) -> ReadingProgressModel:
        """Create or overwrite a user's progress in one book.

        Args:
            update: The new position. On an existing row only the fields that
                were explicitly set are written, so a page update keeps the goal.

        Returns:
            The stored progress

        Raises:
            PersistenceError: If the write fails
        """
        row = self._get_row(update.user_id, update.book_id)
        if row is None:
            row = ReadingProgress(**update.model_dump())
            self.session.add(row)
        else:
            for name, value in update.model_dump(exclude_unset=True).items():
                if name not in KEY_FIELDS:
                    setattr(row, name, value)

        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to save progress for book %s", update.book_id)
            raise PersistenceError(f"Failed to save reading progress: {e}") from e
        logger.info("User %s is on page %s of book %s", row.user_id, row.current_page, row.book_id)
        return ReadingProgressModel.model_validate(row)

    def get_progress(self, user_id: int, book_id: int) -> Optional[ReadingProgressModel]:
        row = self._get_row(user_id, book_id)
        return ReadingProgressModel.model_validate(row) if row else None

    def list_progress(self, user_id: int) -> List[ReadingProgressModel]:
        """A user's tracked books, most recently updated first"""
        try:
            rows = (
                self.session.query(ReadingProgress)
                .filter(ReadingProgress.user_id == user_id)
                .order_by(desc(ReadingProgress.updated_at), desc(ReadingProgress.id))
                .all()
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to load reading progress for user %s", user_id)
            raise PersistenceError(f"Failed to load reading progress: {e}") from e
        return [ReadingProgressModel.model_validate(row) for row in rows]

    def _get_row(self, user_id: int, book_id: int) -> Optional[ReadingProgress]:
        try:
            return (
                self.session.query(ReadingProgress)
                .filter(ReadingProgress.user_id == user_id, ReadingProgress.book_id == book_id)
                .one_or_none()
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to load progress for book %s", book_id)
            raise PersistenceError(f"Failed to load reading progress: {e}") from e
