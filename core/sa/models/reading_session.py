# core/sa/models/reading_session.py
import datetime as dt
from sqlalchemy import Integer, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, utcnow

class ReadingSession(Base):
    """Append-only log of time spent reading. Rows are never updated."""
    __tablename__ = 'reading_session'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('user.id'), nullable=False)
    book_id: Mapped[int | None] = mapped_column(ForeignKey('media_entry.id', ondelete='SET NULL'), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pages: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    # Relationships
    user = relationship('User', back_populates='reading_sessions')
    book = relationship('MediaEntry', back_populates='reading_sessions')

    __table_args__ = (
        Index('idx_reading_session_user_date', 'user_id', 'date'),
    )
