# api/routes/library.py

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from core import config
from core.errors import ShelfError
from core.models.library import LibraryEntry, SearchCandidate
from core.ratings import format_rating
from core.sa.database import get_db
from core.sa.repositories.library import LibraryRepository
from core.search.google_books import GoogleBooksClient
from core.status import StatusTransitionManager
from api.errors import http_error
from api.schemas import LibraryEntrySchema, RatingUpdate, StatusUpdate

router = APIRouter(tags=["library"])


def get_search_provider() -> GoogleBooksClient:
    return GoogleBooksClient()


def entry_schema(entry: LibraryEntry) -> LibraryEntrySchema:
    return LibraryEntrySchema(**entry.model_dump(), rating_display=format_rating(entry.rating, out_of_five=True))


def _get_entry(repo: LibraryRepository, entry_id: int) -> LibraryEntry:
    entry = repo.get_by_id(entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Library entry not found")
    return entry


@router.get("/search", response_model=List[SearchCandidate])
def search_books(
    q: str = Query(..., min_length=1, description="Title, author or keywords"),
    max_results: int = Query(config.SEARCH_MAX_RESULTS, ge=1, le=40, description="Maximum number of results"),
    provider: GoogleBooksClient = Depends(get_search_provider),
):
    """Search the book provider. Results are not saved."""
    try:
        return provider.search(q, max_results)
    except ShelfError as e:
        raise http_error(e)


@router.get("/library/{entry_id}", response_model=LibraryEntrySchema)
def get_entry(entry_id: int, db: Session = Depends(get_db)):
    return entry_schema(_get_entry(LibraryRepository(db), entry_id))


@router.patch("/library/{entry_id}/status", response_model=LibraryEntrySchema)
def update_status(entry_id: int, update: StatusUpdate, db: Session = Depends(get_db)):
    """Move a book to another shelf. Every shelf can reach every other shelf."""
    repo = LibraryRepository(db)
    entry = _get_entry(repo, entry_id)
    try:
        return entry_schema(StatusTransitionManager(repo).transition(entry, update.status))
    except ShelfError as e:
        raise http_error(e)


@router.patch("/library/{entry_id}/rating", response_model=LibraryEntrySchema)
def update_rating(entry_id: int, update: RatingUpdate, db: Session = Depends(get_db)):
    """Rate a book in 0-5 stars; a null rating clears it."""
    repo = LibraryRepository(db)
    entry = _get_entry(repo, entry_id)
    try:
        return entry_schema(StatusTransitionManager(repo).set_rating(entry, update.stars))
    except ShelfError as e:
        raise http_error(e)


@router.delete("/library/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_entry(entry_id: int, db: Session = Depends(get_db)):
    repo = LibraryRepository(db)
    entry = _get_entry(repo, entry_id)
    try:
        StatusTransitionManager(repo).remove(entry)
    except ShelfError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
