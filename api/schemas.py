# api/schemas.py

import datetime as dt
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.library import EntryType, ReadingStatus, SearchCandidate


class UserCreate(BaseModel):
    name: str

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class UserSchema(BaseModel):
    id: int
    name: str
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class LibraryEntrySchema(BaseModel):
    id: int
    user_id: Optional[int] = None
    type: EntryType
    title: str
    author: str
    cover_image_url: str
    release_date: Optional[str] = None
    overview: str
    status: ReadingStatus
    rating: Optional[float] = None
    rating_display: str
    review: Optional[str] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AddBookRequest(BaseModel):
    """A search result the client picked, plus the shelf and optional rating"""
    candidate: SearchCandidate
    status: ReadingStatus
    stars: Optional[float] = Field(default=None, ge=0, le=5)
    review: Optional[str] = None


class StatusUpdate(BaseModel):
    status: ReadingStatus


class RatingUpdate(BaseModel):
    stars: Optional[float] = Field(default=None, ge=0, le=5)


class SessionCreate(BaseModel):
    book_id: Optional[int] = None
    date: Optional[dt.date] = None
    minutes: int = Field(ge=0)
    pages: Optional[int] = Field(default=None, ge=0)


class SessionSchema(BaseModel):
    id: int
    user_id: int
    book_id: Optional[int] = None
    date: dt.date
    minutes: int
    pages: Optional[int] = None
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class DayBucketSchema(BaseModel):
    date: dt.date
    minutes: int
    level: int


class WeekTotalSchema(BaseModel):
    label: str
    year: int
    week: int
    minutes: int


class StatsSchema(BaseModel):
    shelf_counts: Dict[str, int]
    currently_reading: int
    rated_count: int
    average_rating: float
    books_this_month: int
    reading_streak: int
    total_minutes: int
    total_pages: int
    reading_days: int
    weekly: List[WeekTotalSchema]
    heatmap: List[List[DayBucketSchema]]


class ProgressSet(BaseModel):
    """Omitted fields keep their stored values"""
    current_page: Optional[int] = Field(default=None, ge=0)
    total_pages: Optional[int] = Field(default=None, ge=0)
    reading_goal_date: Optional[dt.date] = None


class ProgressSchema(BaseModel):
    id: int
    book_id: int
    current_page: int
    total_pages: Optional[int] = None
    reading_goal_date: Optional[dt.date] = None
    percentage: int
    days_to_goal: Optional[int] = None
    updated_at: Optional[dt.datetime] = None
