"""Tests for the Category Store."""

import pytest

from headline_desk.core.errors import DuplicateName, NotFound
from headline_desk.store.categories import CategoryStore, normalize_name
from headline_desk.store.state import StoreState


def test_create_assigns_sequential_ids_and_trims_name():
    state = StoreState()
    store = CategoryStore(state)

    first = store.create("  Technology ")
    second = store.create("Sports")

    assert first.id == "category-1"
    assert first.name == "Technology"
    assert second.id == "category-2"
    assert state.next_category_id == 3


def test_list_preserves_insertion_order():
    store = CategoryStore(StoreState())
    for name in ["Tech", "Sports", "Business"]:
        store.create(name)

    assert [c.name for c in store.list()] == ["Tech", "Sports", "Business"]


def test_list_returns_copies():
    state = StoreState()
    store = CategoryStore(state)
    store.create("Tech")

    listed = store.list()
    listed[0].name = "Changed"

    assert state.categories[0].name == "Tech"


def test_create_rejects_case_insensitive_duplicate():
    """Creating "Tech" then "tech" fails with DuplicateName"""
    store = CategoryStore(StoreState())
    store.create("Tech")

    with pytest.raises(DuplicateName):
        store.create("tech")
    with pytest.raises(DuplicateName):
        store.create("  TECH  ")


def test_rename_missing_category_raises_not_found():
    store = CategoryStore(StoreState())

    with pytest.raises(NotFound):
        store.rename("category-99", "Anything")


def test_rename_rejects_name_of_another_category():
    store = CategoryStore(StoreState())
    store.create("Tech")
    sports = store.create("Sports")

    with pytest.raises(DuplicateName):
        store.rename(sports.id, "TECH")


def test_rename_allows_case_change_of_same_category():
    store = CategoryStore(StoreState())
    tech = store.create("tech")

    renamed = store.rename(tech.id, "Tech")

    assert renamed.name == "Tech"
    assert store.get(tech.id).name == "Tech"


def test_delete_invokes_cascade_hook():
    removed = []
    store = CategoryStore(StoreState(), on_delete=lambda id: removed.append(id) or 0)
    tech = store.create("Tech")

    assert store.delete(tech.id) is True
    assert removed == [tech.id]
    assert store.list() == []


def test_delete_missing_is_noop():
    removed = []
    state = StoreState()
    store = CategoryStore(state, on_delete=lambda id: removed.append(id) or 0)
    store.create("Tech")
    revision = state.revision

    assert store.delete("category-42") is False
    assert removed == []
    assert state.revision == revision
    assert len(store.list()) == 1


def test_ids_are_not_reused_after_delete():
    store = CategoryStore(StoreState())
    first = store.create("Tech")
    store.delete(first.id)

    again = store.create("Tech")

    assert again.id == "category-2"


def test_normalize_name():
    assert normalize_name("  World News ") == "world news"
