# tests/conftest.py
import sys
import pytest
from pathlib import Path
from datetime import datetime, UTC

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from core.sa.database import Database
from core.sa.models import Base, User, MediaEntry
from core.models.library import LibraryEntry, ReadingStatus, SearchCandidate


@pytest.fixture
def database(tmp_path):
    """Create a throwaway SQLite database for one test"""
    db = Database(f"sqlite:///{tmp_path / 'test_books.db'}")
    Base.metadata.create_all(db.engine)
    yield db
    db.engine.dispose()


@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sample_user(db_session):
    """Create a sample user for testing."""
    user = User(name="Test User")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def sample_entry(db_session, sample_user):
    """Create a library entry for Dune owned by the sample user."""
    entry = MediaEntry(
        user_id=sample_user.id,
        type="book",
        title="Dune",
        author="Frank Herbert",
        cover_image_url="https://example.com/dune.jpg",
        release_date="1965-08-01",
        overview="Spice.",
        status="to_read",
    )
    db_session.add(entry)
    db_session.commit()
    return entry


@pytest.fixture
def make_candidate():
    """Factory for search candidates"""
    def _make(title="Foo", authors=None, published_date=None, **kwargs):
        return SearchCandidate(
            id=kwargs.pop("id", f"vol-{title.lower().replace(' ', '-')}"),
            title=title,
            authors=["Bar"] if authors is None else authors,
            published_date=published_date,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_entry():
    """Factory for library entries that never touch the database"""
    counter = iter(range(1, 10_000))

    def _make(title="Dune", author="Frank Herbert", status=ReadingStatus.TO_READ, created_at=None, **kwargs):
        return LibraryEntry(
            id=kwargs.pop("id", next(counter)),
            title=title,
            author=author,
            status=status,
            created_at=created_at or datetime.now(UTC),
            **kwargs,
        )
    return _make
