# core/models/library.py

from pydantic import BaseModel, ConfigDict, Field
import datetime as dt
from typing import Optional, List
from enum import Enum


class ReadingStatus(str, Enum):
    TO_READ = "to_read"
    READING = "reading"
    READ = "read"


class EntryType(str, Enum):
    BOOK = "book"


class SearchCandidate(BaseModel):
    """A search result from the provider. Never stored as-is."""
    id: str
    title: str = "Untitled"
    subtitle: str = ""
    authors: List[str] = []
    image: str = ""
    published_date: Optional[str] = None
    description: str = ""
    page_count: Optional[int] = None
    categories: List[str] = []
    language: str = ""
    preview_link: str = ""
    info_link: str = ""

    @property
    def primary_author(self) -> str:
        return self.authors[0] if self.authors else ""


class NewLibraryEntry(BaseModel):
    """Fields mapped from a candidate, ready for the store's create call"""
    user_id: Optional[int] = None
    type: EntryType = EntryType.BOOK
    title: str
    author: str = ""
    cover_image_url: str = ""
    release_date: Optional[str] = None
    overview: str = ""
    status: ReadingStatus
    rating: Optional[float] = Field(default=None, ge=0, le=10)
    review: Optional[str] = None


class LibraryEntry(NewLibraryEntry):
    """A persisted library record"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None


class NewReadingSession(BaseModel):
    user_id: int
    book_id: Optional[int] = None
    date: dt.date
    minutes: int = Field(default=0, ge=0)
    pages: Optional[int] = Field(default=None, ge=0)


class ReadingSession(NewReadingSession):
    """An immutable log of time spent reading on one day"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime


class ProgressUpdate(BaseModel):
    """Page position for one book. Fields left unset keep their stored value."""
    user_id: int
    book_id: int
    current_page: int = Field(default=0, ge=0)
    total_pages: Optional[int] = Field(default=None, ge=0)
    reading_goal_date: Optional[dt.date] = None


class ReadingProgress(ProgressUpdate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None
