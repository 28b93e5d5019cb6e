# tests/test_status.py
import pytest
from itertools import product
from unittest.mock import Mock

from core.errors import EntryNotFound, ValidationError
from core.models.library import ReadingStatus
from core.status import StatusTransitionManager, can_transition, parse_status


@pytest.fixture
def store():
    return Mock()


@pytest.fixture
def manager(store):
    return StatusTransitionManager(store)


@pytest.mark.parametrize("current,new", list(product(ReadingStatus, ReadingStatus)))
def test_every_shelf_reaches_every_shelf(current, new):
    assert can_transition(current, new)


def test_parse_status():
    assert parse_status("reading") is ReadingStatus.READING
    assert parse_status(ReadingStatus.READ) is ReadingStatus.READ
    with pytest.raises(ValidationError, match="to_read, reading, read"):
        parse_status("dropped")


def test_transition_updates_status(manager, store, make_entry):
    entry = make_entry(id=7, status=ReadingStatus.TO_READ)
    store.update_entry.return_value = entry.model_copy(update={'status': ReadingStatus.READ})

    updated = manager.transition(entry, "read")

    store.update_entry.assert_called_once_with(7, {'status': ReadingStatus.READ})
    assert updated.status == ReadingStatus.READ


def test_unknown_status_never_reaches_store(manager, store, make_entry):
    with pytest.raises(ValidationError):
        manager.transition(make_entry(), "shelved")
    store.update_entry.assert_not_called()


def test_store_errors_propagate(manager, store, make_entry):
    store.update_entry.side_effect = EntryNotFound("Library entry 7 not found")
    with pytest.raises(EntryNotFound):
        manager.transition(make_entry(id=7), "reading")


def test_set_rating_stores_ten_point_scale(manager, store, make_entry):
    manager.set_rating(make_entry(id=3), 3.5)
    store.update_entry.assert_called_once_with(3, {'rating': 7.0})


def test_set_rating_none_clears(manager, store, make_entry):
    manager.set_rating(make_entry(id=3), None)
    store.update_entry.assert_called_once_with(3, {'rating': None})


@pytest.mark.parametrize("stars", [-0.5, 5.5])
def test_set_rating_out_of_range(manager, store, make_entry, stars):
    with pytest.raises(ValidationError):
        manager.set_rating(make_entry(), stars)
    store.update_entry.assert_not_called()


def test_remove(manager, store, make_entry):
    manager.remove(make_entry(id=9))
    store.delete_entry.assert_called_once_with(9)
