# core/sa/models/library.py
from sqlalchemy import Integer, String, Float, Text, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class MediaEntry(Base, TimestampMixin):
    __tablename__ = 'media_entry'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey('user.id'), nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default='book')
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    # Older rows were written by a generic media table, so the author lives in "director"
    author: Mapped[str] = mapped_column('director', String(255), nullable=False, default='')
    cover_image_url: Mapped[str] = mapped_column('poster_path', String(1000), nullable=False, default='')
    release_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    overview: Mapped[str] = mapped_column(Text, nullable=False, default='')
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    review: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    user = relationship('User', back_populates='media_entries')
    reading_sessions = relationship('ReadingSession', back_populates='book')
    progress = relationship('ReadingProgress', back_populates='book', cascade='all, delete-orphan')

    __table_args__ = (
        Index('idx_media_entry_user_type', 'user_id', 'type'),
        Index('idx_media_entry_status', 'status'),
        Index('idx_media_entry_title', 'title'),
    )
