# api/routes/users.py

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core import config
from core.errors import ShelfError
from core.models.library import NewReadingSession, ProgressUpdate
from core.sa.database import get_db
from core.sa.repositories.library import LibraryRepository
from core.sa.repositories.reading_progress import ReadingProgressRepository
from core.sa.repositories.reading_session import ReadingSessionRepository
from core.sa.repositories.user import UserRepository
from core.search.google_books import GoogleBooksClient
from core.stats.reading import (
    SORT_KEYS, chunk_weeks, filter_shelf, heat_level, library_summary,
    per_day_buckets, progress_percentage, days_to_goal, session_totals, sort_entries,
    utc_today, weekly_totals,
)
from core.workflow import AddBookWorkflow, Done, DuplicateBlocked, Failed, ResultsShown
from api.errors import http_error
from api.routes.library import entry_schema, get_search_provider
from api.schemas import (
    AddBookRequest, DayBucketSchema, LibraryEntrySchema, ProgressSchema, ProgressSet,
    SessionCreate, SessionSchema, StatsSchema, UserCreate, UserSchema, WeekTotalSchema,
)

router = APIRouter(prefix="/users", tags=["users"])


def _require_user(db: Session, user_id: int):
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    try:
        return UserRepository(db).create_user(user.name)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{user_id}", response_model=UserSchema)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return _require_user(db, user_id)


@router.get("/{user_id}/library", response_model=List[LibraryEntrySchema])
def get_library(
    user_id: int,
    shelf: str = Query("all", pattern="^(all|to_read|reading|read)$", description="Shelf to show"),
    sort: str = Query("recent", description=f"One of: {', '.join(SORT_KEYS)}"),
    title: Optional[str] = Query(None, description="Only books whose title contains this text"),
    db: Session = Depends(get_db)
):
    """
    Get a user's books, optionally limited to one shelf.

    Args:
        user_id: The ID of the user
        shelf: "all" or a reading status
        sort: "recent" (newest first), "title" or "rating"
        title: Case-insensitive title filter
        db: Database session

    Returns:
        List of library entries
    """
    _require_user(db, user_id)
    try:
        repo = LibraryRepository(db)
        entries = repo.search_by_title(title, user_id=user_id) if title else repo.list_entries(user_id=user_id)
        return [entry_schema(e) for e in sort_entries(filter_shelf(entries, shelf), sort)]
    except ShelfError as e:
        raise http_error(e)


@router.post("/{user_id}/library", response_model=LibraryEntrySchema, status_code=status.HTTP_201_CREATED)
def add_book(
    user_id: int,
    request: AddBookRequest,
    db: Session = Depends(get_db),
    provider: GoogleBooksClient = Depends(get_search_provider),
):
    """
    Add a picked search result to a user's library.

    Runs the add workflow from the point where the client has already chosen a
    result. Finished books carry the optional rating and review; other shelves
    ignore them. A book already in the library gives 409 with the existing entry.
    """
    _require_user(db, user_id)
    flow = AddBookWorkflow(
        provider,
        LibraryRepository(db),
        user_id=user_id,
        state=ResultsShown(query=request.candidate.title, results=(request.candidate,)),
    )
    try:
        flow.select(0)
        outcome = flow.choose_status(request.status)
        if not isinstance(outcome, (Done, DuplicateBlocked, Failed)):
            outcome = flow.submit_rating(request.stars, request.review)
    except ShelfError as e:
        raise http_error(e)

    if isinstance(outcome, DuplicateBlocked):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "This book already exists in your library",
                "existing": entry_schema(outcome.existing).model_dump(mode="json"),
            },
        )
    if isinstance(outcome, Failed):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=outcome.message)
    return entry_schema(outcome.entry)


@router.post("/{user_id}/sessions", response_model=SessionSchema, status_code=status.HTTP_201_CREATED)
def log_session(user_id: int, session: SessionCreate, db: Session = Depends(get_db)):
    _require_user(db, user_id)
    if session.book_id is not None and LibraryRepository(db).get_by_id(session.book_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Library entry not found")
    try:
        return ReadingSessionRepository(db).create_session(NewReadingSession(
            user_id=user_id,
            book_id=session.book_id,
            date=session.date or utc_today(),
            minutes=session.minutes,
            pages=session.pages,
        ))
    except ShelfError as e:
        raise http_error(e)


@router.get("/{user_id}/sessions", response_model=List[SessionSchema])
def get_sessions(
    user_id: int,
    since: Optional[date] = Query(None, description="Only sessions on or after this date"),
    db: Session = Depends(get_db)
):
    _require_user(db, user_id)
    try:
        return ReadingSessionRepository(db).list_sessions(user_id, since=since)
    except ShelfError as e:
        raise http_error(e)


@router.get("/{user_id}/stats", response_model=StatsSchema)
def get_stats(
    user_id: int,
    days: int = Query(config.HEATMAP_WINDOW_DAYS, ge=1, le=366, description="Heatmap window in days"),
    weeks: int = Query(config.WEEKLY_TOTALS_LIMIT, ge=1, le=53, description="Number of recent weeks to total"),
    db: Session = Depends(get_db)
):
    """Reading statistics: shelf counts, streak, weekly totals and a daily heatmap."""
    _require_user(db, user_id)
    try:
        entries = LibraryRepository(db).list_entries(user_id=user_id)
        sessions = ReadingSessionRepository(db).list_sessions(user_id)
    except ShelfError as e:
        raise http_error(e)

    heatmap = [
        [DayBucketSchema(date=b.date, minutes=b.minutes, level=heat_level(b.minutes)) for b in week]
        for week in chunk_weeks(per_day_buckets(sessions, days))
    ]
    weekly = [
        WeekTotalSchema(label=w.label, year=w.year, week=w.week, minutes=w.minutes)
        for w in weekly_totals(sessions, weeks)
    ]
    return StatsSchema(
        **library_summary(entries),
        **session_totals(sessions),
        weekly=weekly,
        heatmap=heatmap,
    )


def progress_schema(progress) -> ProgressSchema:
    return ProgressSchema(
        **progress.model_dump(include={'id', 'book_id', 'current_page', 'total_pages', 'reading_goal_date', 'updated_at'}),
        percentage=progress_percentage(progress.current_page, progress.total_pages),
        days_to_goal=days_to_goal(progress.reading_goal_date),
    )


@router.put("/{user_id}/progress/{book_id}", response_model=ProgressSchema)
def set_progress(user_id: int, book_id: int, update: ProgressSet, db: Session = Depends(get_db)):
    """Create or update where the user is in one of their books."""
    _require_user(db, user_id)
    entry = LibraryRepository(db).get_by_id(book_id)
    if entry is None or entry.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Library entry not found")
    fields = {name: value for name, value in update.model_dump(exclude_unset=True).items() if value is not None}
    try:
        saved = ReadingProgressRepository(db).upsert_progress(
            ProgressUpdate(user_id=user_id, book_id=book_id, **fields)
        )
    except ShelfError as e:
        raise http_error(e)
    return progress_schema(saved)


@router.get("/{user_id}/progress", response_model=List[ProgressSchema])
def get_progress(user_id: int, db: Session = Depends(get_db)):
    _require_user(db, user_id)
    try:
        return [progress_schema(p) for p in ReadingProgressRepository(db).list_progress(user_id)]
    except ShelfError as e:
        raise http_error(e)
