# tests/test_sa/test_repositories/test_reading_progress_repository.py
import pytest
from datetime import date, datetime, timedelta, UTC
from sqlalchemy.exc import IntegrityError

from core.errors import PersistenceError
from core.models.library import ProgressUpdate, ReadingProgress
from core.sa.models import MediaEntry, ReadingProgress as ProgressRow
from core.sa.repositories.library import LibraryRepository
from core.sa.repositories.reading_progress import ReadingProgressRepository


@pytest.fixture
def repo(db_session):
    return ReadingProgressRepository(db_session)


def test_first_update_creates_row(repo, sample_user, sample_entry):
    saved = repo.upsert_progress(ProgressUpdate(
        user_id=sample_user.id, book_id=sample_entry.id, current_page=40,
        total_pages=412, reading_goal_date=date(2024, 5, 1),
    ))

    assert isinstance(saved, ReadingProgress)
    assert saved.id is not None
    assert saved.current_page == 40
    assert saved.total_pages == 412
    assert saved.reading_goal_date == date(2024, 5, 1)


def test_update_overwrites_only_given_fields(repo, sample_user, sample_entry):
    """A later page update keeps the length and goal already stored"""
    first = repo.upsert_progress(ProgressUpdate(
        user_id=sample_user.id, book_id=sample_entry.id, current_page=40,
        total_pages=412, reading_goal_date=date(2024, 5, 1),
    ))

    second = repo.upsert_progress(ProgressUpdate(user_id=sample_user.id, book_id=sample_entry.id, current_page=120))

    assert second.id == first.id
    assert second.current_page == 120
    assert second.total_pages == 412
    assert second.reading_goal_date == date(2024, 5, 1)
    assert len(repo.list_progress(sample_user.id)) == 1


def test_one_row_per_user_and_book(db_session, sample_user, sample_entry):
    db_session.add(ProgressRow(user_id=sample_user.id, book_id=sample_entry.id, current_page=1))
    db_session.commit()

    db_session.add(ProgressRow(user_id=sample_user.id, book_id=sample_entry.id, current_page=2))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_get_progress(repo, sample_user, sample_entry):
    assert repo.get_progress(sample_user.id, sample_entry.id) is None
    repo.upsert_progress(ProgressUpdate(user_id=sample_user.id, book_id=sample_entry.id, current_page=5))
    assert repo.get_progress(sample_user.id, sample_entry.id).current_page == 5


def test_list_most_recently_updated_first(repo, db_session, sample_user, sample_entry):
    other = MediaEntry(user_id=sample_user.id, type="book", title="Emma", author="Jane Austen", status="reading")
    db_session.add(other)
    db_session.commit()
    now = datetime.now(UTC)
    db_session.add_all([
        ProgressRow(user_id=sample_user.id, book_id=sample_entry.id, current_page=10, updated_at=now - timedelta(days=2)),
        ProgressRow(user_id=sample_user.id, book_id=other.id, current_page=20, updated_at=now),
    ])
    db_session.commit()

    assert [p.book_id for p in repo.list_progress(sample_user.id)] == [other.id, sample_entry.id]
    assert repo.list_progress(9999) == []


def test_removing_book_removes_progress(repo, db_session, sample_user, sample_entry):
    repo.upsert_progress(ProgressUpdate(user_id=sample_user.id, book_id=sample_entry.id, current_page=5))

    LibraryRepository(db_session).delete_entry(sample_entry.id)

    assert repo.list_progress(sample_user.id) == []


def test_unknown_book_is_rejected(repo, sample_user):
    with pytest.raises(PersistenceError):
        repo.upsert_progress(ProgressUpdate(user_id=sample_user.id, book_id=9999, current_page=1))
