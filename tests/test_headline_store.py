"""Tests for the Headline Store."""

from datetime import datetime

import pytest

from headline_desk.core.errors import NotFound
from headline_desk.core.types import HeadlineDraft, HeadlinePriority, HeadlineState, HeadlineUpdate
from headline_desk.store.headlines import HeadlineStore, unique_ids
from headline_desk.store.state import StoreState


def _draft(title: str, **overrides) -> HeadlineDraft:
    values = {
        "main_title": title,
        "categories": ["category-1"],
        "publish_date": datetime(2026, 3, 1, 9, 30),
    }
    values.update(overrides)
    return HeadlineDraft(**values)


def _store_with(*titles: str) -> tuple[HeadlineStore, list[str]]:
    store = HeadlineStore(StoreState())
    ids = [store.insert(_draft(title)) for title in titles]
    return store, ids


def test_insert_assigns_id_and_places_last():
    store, ids = _store_with("A", "B", "C")

    assert ids == ["headline-1", "headline-2", "headline-3"]
    assert [store.get(id).order for id in ids] == [0, 1, 2]


def test_insert_uses_max_order_not_count():
    store, ids = _store_with("A", "B")
    store.assign_orders({ids[1]: 10})

    new_id = store.insert(_draft("C"))

    assert store.get(new_id).order == 11


def test_insert_defaults_subtitle_and_parses_enums():
    store = HeadlineStore(StoreState())
    id = store.insert(_draft("A", subtitle=None, state="In Review", priority="High"))

    headline = store.get(id)
    assert headline.subtitle == ""
    assert headline.state is HeadlineState.IN_REVIEW
    assert headline.priority is HeadlinePriority.HIGH


def test_insert_drops_duplicate_category_ids():
    store = HeadlineStore(StoreState())
    id = store.insert(_draft("A", categories=["category-1", "category-2", "category-1"]))

    assert store.get(id).categories == ["category-1", "category-2"]


def test_get_missing_raises_not_found():
    store = HeadlineStore(StoreState())

    with pytest.raises(NotFound):
        store.get("headline-1")


def test_get_returns_copy():
    store, ids = _store_with("A")

    copy = store.get(ids[0])
    copy.categories.append("category-9")
    copy.main_title = "Mutated"

    assert store.get(ids[0]).categories == ["category-1"]
    assert store.get(ids[0]).main_title == "A"


def test_update_merges_only_provided_fields():
    store, ids = _store_with("A")

    store.update(ids[0], HeadlineUpdate(subtitle="New subtitle", is_breaking=True))

    headline = store.get(ids[0])
    assert headline.main_title == "A"
    assert headline.subtitle == "New subtitle"
    assert headline.is_breaking is True
    assert headline.order == 0


def test_update_allows_clearing_subtitle():
    store = HeadlineStore(StoreState())
    id = store.insert(_draft("A", subtitle="Something"))

    store.update(id, HeadlineUpdate(subtitle=""))

    assert store.get(id).subtitle == ""


def test_update_from_dict_drops_order():
    store, ids = _store_with("A", "B")

    update = HeadlineUpdate.from_dict({"main_title": "A2", "order": 99, "id": "headline-7"})
    store.update(ids[0], update)

    headline = store.get(ids[0])
    assert headline.main_title == "A2"
    assert headline.order == 0
    assert headline.id == ids[0]


def test_update_missing_raises_not_found():
    store = HeadlineStore(StoreState())

    with pytest.raises(NotFound):
        store.update("headline-1", HeadlineUpdate(main_title="X"))


def test_update_without_changes_does_not_touch_state():
    state = StoreState()
    store = HeadlineStore(state)
    id = store.insert(_draft("A"))
    revision = state.revision

    store.update(id, HeadlineUpdate(main_title="A"))

    assert state.revision == revision


def test_delete_is_idempotent():
    store, ids = _store_with("A", "B")

    assert store.delete(ids[0]) is True
    assert store.delete(ids[0]) is False
    assert [h.id for h in store.all()] == [ids[1]]


def test_bulk_delete_counts_unique_removals():
    store, ids = _store_with("A", "B", "C")

    removed = store.bulk_delete([ids[0], ids[0], "headline-99", ids[2]])

    assert removed == 2
    assert [h.id for h in store.all()] == [ids[1]]


def test_bulk_set_state_counts_already_matching_records():
    store, ids = _store_with("A", "B", "C")
    store.update(ids[0], HeadlineUpdate(state=HeadlineState.APPROVED))

    touched = store.bulk_set_state([ids[0], ids[1], "headline-99"], "Approved")

    assert touched == 2
    assert store.get(ids[1]).state is HeadlineState.APPROVED
    assert store.get(ids[2]).state is HeadlineState.DRAFT


def test_remove_category_reference_touches_only_that_field():
    store = HeadlineStore(StoreState())
    h1 = store.insert(_draft("A", categories=["category-1", "category-2"], is_breaking=True))
    h2 = store.insert(_draft("B", categories=["category-2"]))
    h3 = store.insert(_draft("C", categories=["category-3"]))
    before = {id: store.get(id) for id in (h1, h2, h3)}

    cleaned = store.remove_category_reference("category-2")

    assert cleaned == 2
    assert store.get(h1).categories == ["category-1"]
    assert store.get(h2).categories == []
    assert store.get(h3) == before[h3]
    after_h1 = store.get(h1)
    assert (after_h1.main_title, after_h1.is_breaking, after_h1.order) == (
        before[h1].main_title,
        before[h1].is_breaking,
        before[h1].order,
    )


def test_unique_ids_keeps_first_occurrence():
    assert unique_ids(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
