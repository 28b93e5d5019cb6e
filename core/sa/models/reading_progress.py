# core/sa/models/reading_progress.py
import datetime as dt
from sqlalchemy import Integer, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class ReadingProgress(Base, TimestampMixin):
    """Where a user is in one book. One row per (user, book), overwritten in place."""
    __tablename__ = 'reading_progress'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('user.id'), nullable=False)
    book_id: Mapped[int] = mapped_column(ForeignKey('media_entry.id', ondelete='CASCADE'), nullable=False)
    current_page: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_pages: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reading_goal_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)

    # Relationships
    user = relationship('User', back_populates='reading_progress')
    book = relationship('MediaEntry', back_populates='progress')

    __table_args__ = (
        UniqueConstraint('user_id', 'book_id', name='uq_reading_progress_user_book'),
    )
