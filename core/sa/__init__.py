# core/sa/__init__.py
from .database import Database
from .models import Base, User, MediaEntry, ReadingSession, ReadingProgress

__all__ = [
    'Database',
    'Base',
    'User',
    'MediaEntry',
    'ReadingSession',
    'ReadingProgress',
]
