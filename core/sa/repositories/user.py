# core/sa/repositories/user.py
import logging
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from core.models.library import EntryType
from core.sa.models import MediaEntry, User

logger = logging.getLogger(__name__)


class UserRepository:
    """Library owners. Names are unique, compared without surrounding whitespace."""

    def __init__(self, session: Session):
        self.session = session

    def create_user(self, name: str) -> User:
        """Create a new library owner.

        Args:
            name: Display name; surrounding whitespace is dropped

        Returns:
            The created User

        Raises:
            ValueError: If the name is blank or already taken
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("User name must not be blank")
        if self.get_by_name(name):
            raise ValueError(f"User with name '{name}' already exists")

        user = User(name=name)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race with another insert of the same name
            self.session.rollback()
            raise ValueError(f"User with name '{name}' already exists")
        logger.info("Created user %s (%s)", user.id, user.name)
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_by_name(self, name: str) -> Optional[User]:
        return self.session.query(User).filter(User.name == name.strip()).one_or_none()

    def list_users(self) -> List[User]:
        return self.session.query(User).order_by(User.id).all()

    def list_users_with_book_counts(self) -> List[Tuple[User, int]]:
        """Every user with the number of books in their library, by id"""
        book_count = func.count(MediaEntry.id)
        rows = (
            self.session.query(User, book_count)
            .outerjoin(MediaEntry, (MediaEntry.user_id == User.id) & (MediaEntry.type == EntryType.BOOK.value))
            .group_by(User.id)
            .order_by(User.id)
            .all()
        )
        return [(user, count) for user, count in rows]
