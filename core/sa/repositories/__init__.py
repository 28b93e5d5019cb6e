# core/sa/repositories/__init__.py
from .library import LibraryRepository
from .reading_progress import ReadingProgressRepository
from .reading_session import ReadingSessionRepository
from .user import UserRepository

__all__ = ['LibraryRepository', 'ReadingProgressRepository', 'ReadingSessionRepository', 'UserRepository']
