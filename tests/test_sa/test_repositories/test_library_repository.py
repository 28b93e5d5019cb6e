# tests/test_sa/test_repositories/test_library_repository.py
import pytest
from datetime import datetime, timedelta, UTC
from unittest.mock import Mock
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from core.errors import EntryNotFound, PersistenceError
from core.models.library import LibraryEntry, NewLibraryEntry, ReadingStatus
from core.sa.models import MediaEntry, User
from core.sa.repositories.library import LibraryRepository


@pytest.fixture
def repo(db_session):
    return LibraryRepository(db_session)


def _new(user_id, title="Foo", author="Bar", status=ReadingStatus.TO_READ, **kwargs):
    return NewLibraryEntry(user_id=user_id, title=title, author=author, status=status, **kwargs)


def test_create_entry(repo, db_session, sample_user):
    """Test creating an entry returns a plain model with id and timestamps"""
    entry = repo.create_entry(_new(sample_user.id, release_date="2001-01-01", rating=9.0, review="Good"))

    assert isinstance(entry, LibraryEntry)
    assert entry.id is not None
    assert entry.created_at is not None
    assert entry.status == ReadingStatus.TO_READ
    assert entry.rating == 9.0

    director = db_session.execute(
        text("SELECT director FROM media_entry WHERE id = :id"), {'id': entry.id}
    ).scalar_one()
    assert director == "Bar"


def test_get_by_id(repo, sample_entry):
    entry = repo.get_by_id(sample_entry.id)

    assert entry.title == "Dune"
    assert entry.author == "Frank Herbert"
    assert entry.cover_image_url == "https://example.com/dune.jpg"
    assert repo.get_by_id(9999) is None


def test_list_entries_newest_first(repo, db_session, sample_user):
    now = datetime.now(UTC)
    for i, title in enumerate(["Oldest", "Middle", "Newest"]):
        db_session.add(MediaEntry(
            user_id=sample_user.id, type="book", title=title, status="to_read",
            created_at=now - timedelta(days=3 - i),
        ))
    db_session.commit()

    assert [e.title for e in repo.list_entries(user_id=sample_user.id)] == ["Newest", "Middle", "Oldest"]


def test_list_entries_filters(repo, db_session, sample_user, sample_entry):
    other = User(name="Other User")
    db_session.add(other)
    db_session.commit()
    repo.create_entry(_new(other.id, title="Emma", author="Jane Austen"))
    repo.create_entry(_new(sample_user.id, title="Ubik", author="Philip K. Dick", status=ReadingStatus.READING))
    db_session.add(MediaEntry(user_id=sample_user.id, type="movie", title="Alien", status="to_read"))
    db_session.commit()

    mine = repo.list_entries(user_id=sample_user.id)
    assert {e.title for e in mine} == {"Dune", "Ubik"}
    assert [e.title for e in repo.list_entries(user_id=sample_user.id, status="reading")] == ["Ubik"]
    assert [e.title for e in repo.list_entries(status=ReadingStatus.TO_READ)] == ["Emma", "Dune"]


def test_search_by_title(repo, sample_user, sample_entry):
    repo.create_entry(_new(sample_user.id, title="Children of Dune", author="Frank Herbert"))
    repo.create_entry(_new(sample_user.id, title="Emma", author="Jane Austen"))

    assert {e.title for e in repo.search_by_title("dune")} == {"Dune", "Children of Dune"}
    assert repo.search_by_title("dune", limit=1)[0].title in {"Dune", "Children of Dune"}


def test_update_entry(repo, sample_entry):
    updated = repo.update_entry(sample_entry.id, {'status': ReadingStatus.READ, 'rating': 7.5})

    assert updated.status == ReadingStatus.READ
    assert updated.rating == 7.5
    assert repo.get_by_id(sample_entry.id).status == ReadingStatus.READ


def test_update_rejects_unknown_fields(repo, sample_entry):
    with pytest.raises(PersistenceError, match="user_id"):
        repo.update_entry(sample_entry.id, {'user_id': 2})


def test_update_missing_entry(repo):
    with pytest.raises(EntryNotFound):
        repo.update_entry(9999, {'status': 'read'})


def test_delete_entry(repo, sample_entry):
    repo.delete_entry(sample_entry.id)

    assert repo.get_by_id(sample_entry.id) is None
    with pytest.raises(EntryNotFound):
        repo.delete_entry(sample_entry.id)


def test_commit_failure_is_wrapped(repo, db_session, sample_user, monkeypatch):
    """Test database errors surface as PersistenceError after a rollback"""
    rollback = Mock(wraps=db_session.rollback)
    monkeypatch.setattr(db_session, "commit", Mock(side_effect=OperationalError("INSERT", {}, Exception("database is locked"))))
    monkeypatch.setattr(db_session, "rollback", rollback)

    with pytest.raises(PersistenceError, match="Failed to add 'Foo'"):
        repo.create_entry(_new(sample_user.id))
    rollback.assert_called_once()


def test_search_by_title_books_only_newest_first(repo, db_session, sample_user, sample_entry):
    db_session.add(MediaEntry(user_id=sample_user.id, type="movie", title="Dune", status="to_read"))
    db_session.commit()
    newer = repo.create_entry(_new(sample_user.id, title="Dune Messiah", author="Frank Herbert"))

    results = repo.search_by_title("  DUNE ", user_id=sample_user.id)

    assert [e.id for e in results] == [newer.id, sample_entry.id]
    assert repo.search_by_title("dune", user_id=9999) == []
