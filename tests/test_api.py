# tests/test_api.py
import pytest
from datetime import timedelta
from unittest.mock import Mock
from fastapi.testclient import TestClient

from api.main import app
from api.routes.library import get_search_provider
from core.errors import NetworkError
from core.models.library import SearchCandidate
from core.sa.database import get_db
from core.stats.reading import utc_today


@pytest.fixture
def provider():
    return Mock()


@pytest.fixture
def client(db_session, provider):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_search_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user_id(client):
    return client.post("/users", json={"name": "Ada"}).json()["id"]


def _candidate(title="Foo", author="Bar", published="2001"):
    return {"id": f"vol-{title.lower()}", "title": title, "authors": [author], "published_date": published}


def _add(client, user_id, status="to_read", **kwargs):
    payload = {"candidate": _candidate(**kwargs.pop("candidate", {})), "status": status, **kwargs}
    return client.post(f"/users/{user_id}/library", json=payload)


def test_root(client):
    assert client.get("/").json() == {"message": "Reading Companion API"}


def test_create_user(client):
    response = client.post("/users", json={"name": "Ada"})
    assert response.status_code == 201
    assert response.json()["name"] == "Ada"

    assert client.post("/users", json={"name": "Ada"}).status_code == 400
    assert client.post("/users", json={"name": "  "}).status_code == 422


def test_unknown_user(client):
    assert client.get("/users/9999").status_code == 404
    assert client.get("/users/9999/library").status_code == 404


def test_add_book(client, user_id):
    response = _add(client, user_id)

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Foo"
    assert data["author"] == "Bar"
    assert data["release_date"] == "2001-01-01"
    assert data["status"] == "to_read"
    assert data["rating"] is None
    assert data["rating_display"] == "Not rated"


def test_add_unfinished_book_ignores_rating(client, user_id):
    data = _add(client, user_id, status="reading", stars=4, review="Nice").json()
    assert data["rating"] is None
    assert data["review"] is None


def test_add_finished_book_with_rating(client, user_id):
    data = _add(client, user_id, status="read", stars=4.5, review="  Loved it ").json()

    assert data["rating"] == 9.0
    assert data["rating_display"] == "4.5/5"
    assert data["review"] == "Loved it"


def test_add_duplicate_conflicts(client, user_id):
    """Adding the same book twice returns the existing entry with a 409"""
    first = _add(client, user_id).json()

    response = _add(client, user_id, status="read", candidate={"title": " FOO ", "author": "bar"})

    assert response.status_code == 409
    assert response.json()["detail"]["existing"]["id"] == first["id"]
    assert len(client.get(f"/users/{user_id}/library").json()) == 1


def test_get_library_shelf_and_sort(client, user_id):
    _add(client, user_id, candidate={"title": "beta"})
    _add(client, user_id, status="read", stars=3, candidate={"title": "Alpha"})
    _add(client, user_id, status="read", stars=5, candidate={"title": "Gamma"})

    titles = [e["title"] for e in client.get(f"/users/{user_id}/library", params={"sort": "title"}).json()]
    assert titles == ["Alpha", "beta", "Gamma"]

    finished = client.get(f"/users/{user_id}/library", params={"shelf": "read", "sort": "rating"}).json()
    assert [e["title"] for e in finished] == ["Gamma", "Alpha"]

    assert client.get(f"/users/{user_id}/library", params={"sort": "author"}).status_code == 400
    assert client.get(f"/users/{user_id}/library", params={"shelf": "dropped"}).status_code == 422


def test_update_status(client, user_id):
    entry_id = _add(client, user_id).json()["id"]

    response = client.patch(f"/library/{entry_id}/status", json={"status": "reading"})
    assert response.status_code == 200
    assert response.json()["status"] == "reading"

    assert client.patch(f"/library/{entry_id}/status", json={"status": "dropped"}).status_code == 422
    assert client.patch("/library/9999/status", json={"status": "read"}).status_code == 404


def test_update_rating(client, user_id):
    entry_id = _add(client, user_id).json()["id"]

    data = client.patch(f"/library/{entry_id}/rating", json={"stars": 3.5}).json()
    assert data["rating"] == 7.0
    assert data["rating_display"] == "3.5/5"

    assert client.patch(f"/library/{entry_id}/rating", json={"stars": None}).json()["rating"] is None
    assert client.patch(f"/library/{entry_id}/rating", json={"stars": 6}).status_code == 422


def test_remove_entry(client, user_id):
    entry_id = _add(client, user_id).json()["id"]

    assert client.delete(f"/library/{entry_id}").status_code == 204
    assert client.get(f"/library/{entry_id}").status_code == 404
    assert client.delete(f"/library/{entry_id}").status_code == 404


def test_sessions_and_stats(client, user_id):
    entry_id = _add(client, user_id, status="read", stars=4).json()["id"]
    today = utc_today()

    response = client.post(f"/users/{user_id}/sessions", json={"book_id": entry_id, "minutes": 40, "pages": 20})
    assert response.status_code == 201
    assert response.json()["date"] == today.isoformat()
    client.post(f"/users/{user_id}/sessions", json={"minutes": 20, "date": (today - timedelta(days=1)).isoformat()})

    assert len(client.get(f"/users/{user_id}/sessions").json()) == 2
    assert client.post(f"/users/{user_id}/sessions", json={"book_id": 9999, "minutes": 5}).status_code == 404
    assert client.post(f"/users/{user_id}/sessions", json={"minutes": -5}).status_code == 422

    stats = client.get(f"/users/{user_id}/stats").json()
    assert stats["shelf_counts"]["read"] == 1
    assert stats["reading_streak"] == 1
    assert stats["total_minutes"] == 60
    assert stats["total_pages"] == 20
    assert stats["reading_days"] == 2
    assert len(stats["heatmap"]) == 12
    assert all(len(week) == 7 for week in stats["heatmap"])
    assert stats["heatmap"][-1][-1] == {"date": today.isoformat(), "minutes": 40, "level": 3}
    assert sum(w["minutes"] for w in stats["weekly"]) == 60


def test_search(client, provider):
    provider.search.return_value = [SearchCandidate(**_candidate())]

    response = client.get("/search", params={"q": "foo", "max_results": 5})

    assert response.status_code == 200
    assert response.json()[0]["title"] == "Foo"
    provider.search.assert_called_once_with("foo", 5)


def test_search_provider_down(client, provider):
    provider.search.side_effect = NetworkError("Failed to search books: timeout")
    response = client.get("/search", params={"q": "foo"})
    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to search books: timeout"


def test_library_title_filter(client, user_id):
    _add(client, user_id, candidate={"title": "Dune"})
    _add(client, user_id, candidate={"title": "Children of Dune"})
    _add(client, user_id, candidate={"title": "Emma"})

    titles = [e["title"] for e in client.get(f"/users/{user_id}/library", params={"title": "dune", "sort": "title"}).json()]

    assert titles == ["Children of Dune", "Dune"]


def test_reading_progress(client, user_id):
    entry_id = _add(client, user_id, status="reading").json()["id"]
    goal = (utc_today() + timedelta(days=5)).isoformat()

    response = client.put(
        f"/users/{user_id}/progress/{entry_id}",
        json={"current_page": 50, "total_pages": 200, "reading_goal_date": goal},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["percentage"] == 25
    assert data["days_to_goal"] == 5

    data = client.put(f"/users/{user_id}/progress/{entry_id}", json={"current_page": 150}).json()
    assert data["current_page"] == 150
    assert data["total_pages"] == 200
    assert data["percentage"] == 75
    assert data["reading_goal_date"] == goal

    tracked = client.get(f"/users/{user_id}/progress").json()
    assert [(p["book_id"], p["percentage"]) for p in tracked] == [(entry_id, 75)]


def test_reading_progress_needs_own_book(client, user_id):
    entry_id = _add(client, user_id).json()["id"]
    other_id = client.post("/users", json={"name": "Grace"}).json()["id"]

    assert client.put(f"/users/{other_id}/progress/{entry_id}", json={"current_page": 1}).status_code == 404
    assert client.put(f"/users/{user_id}/progress/9999", json={"current_page": 1}).status_code == 404
    assert client.put(f"/users/{user_id}/progress/{entry_id}", json={"current_page": -1}).status_code == 422
    assert client.get("/users/9999/progress").status_code == 404
