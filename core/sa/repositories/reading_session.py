import logging
from datetime import date
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import PersistenceError
from core.models.library import NewReadingSession, ReadingSession as ReadingSessionModel
from core.sa.models import ReadingSession

logger = logging.getLogger(__name__)


class ReadingSessionRepository:
    """Append-only store for reading sessions. There is no update or delete."""

    def __init__(self, session: Session):
        self.session = session

    def create_session(self, new_session: NewReadingSession) -> ReadingSessionModel:
        """Log a reading session.

        Args:
            new_session: Who read, which book (optional), when, and how much

        Returns:
            The stored session with its id

        Raises:
            PersistenceError: If the insert fails
        """
        row = ReadingSession(
            user_id=new_session.user_id,
            book_id=new_session.book_id,
            date=new_session.date,
            minutes=new_session.minutes,
            pages=new_session.pages,
        )
        self.session.add(row)
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to log reading session for user %s", new_session.user_id)
            raise PersistenceError(f"Failed to log reading session: {e}") from e
        logger.info("Logged %s minutes on %s for user %s", row.minutes, row.date, row.user_id)
        return ReadingSessionModel.model_validate(row)

    def list_sessions(self, user_id: int, since: Optional[date] = None) -> List[ReadingSessionModel]:
        """Get a user's sessions, most recent date first.

        Args:
            user_id: The ID of the user
            since: Only include sessions on or after this date

        Returns:
            List of ReadingSession models
        """
        try:
            query = self.session.query(ReadingSession).filter(ReadingSession.user_id == user_id)
            if since is not None:
                query = query.filter(ReadingSession.date >= since)
            rows = query.order_by(desc(ReadingSession.date), desc(ReadingSession.id)).all()
        except SQLAlchemyError as e:
            logger.exception("Failed to load reading sessions for user %s", user_id)
            raise PersistenceError(f"Failed to load reading sessions: {e}") from e
        return [ReadingSessionModel.model_validate(row) for row in rows]
