# core/sa/models/__init__.py
from .base import Base, TimestampMixin, utcnow
from .user import User
from .library import MediaEntry
from .reading_session import ReadingSession
from .reading_progress import ReadingProgress

__all__ = [
    'Base',
    'TimestampMixin',
    'utcnow',
    'User',
    'MediaEntry',
    'ReadingSession',
    'ReadingProgress',
]
