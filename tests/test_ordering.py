"""Tests for the Ordering Engine."""

from datetime import datetime
import random

from headline_desk.core.types import HeadlineDraft
from headline_desk.ordering import has_order_conflicts, renumber, reorder
from headline_desk.query import query
from headline_desk.store.headlines import HeadlineStore
from headline_desk.store.state import StoreState


def _store(count: int) -> tuple[HeadlineStore, list[str]]:
    store = HeadlineStore(StoreState())
    ids = [
        store.insert(
            HeadlineDraft(
                main_title=f"Headline {n}",
                categories=["category-1"],
                publish_date=datetime(2026, 1, 1),
            )
        )
        for n in range(count)
    ]
    return store, ids


def _display_order(store: HeadlineStore) -> list[str]:
    return [h.id for h in query(store.all()).items]


def _orders(store: HeadlineStore) -> list[int]:
    return sorted(h.order for h in store.all())


def test_move_last_to_first():
    """Moving the item at index 4 to index 0 keeps the rest in prior order"""
    store, ids = _store(5)

    reorder(store, [ids[4], ids[0], ids[1], ids[2], ids[3]])

    assert _display_order(store) == [ids[4], ids[0], ids[1], ids[2], ids[3]]
    assert _orders(store) == [0, 1, 2, 3, 4]


def test_partial_page_reorder_keeps_other_pages():
    store, ids = _store(10)
    page_two = ids[5:]

    reorder(store, [page_two[4]] + page_two[:4])

    assert _display_order(store) == ids[:5] + [ids[9], ids[5], ids[6], ids[7], ids[8]]


def test_non_contiguous_subset_is_placed_from_lowest_order():
    store, ids = _store(5)

    reorder(store, [ids[3], ids[1]])

    order = _display_order(store)
    assert order.index(ids[3]) < order.index(ids[1])
    others = [id for id in order if id not in (ids[1], ids[3])]
    assert others == [ids[0], ids[2], ids[4]]
    assert _orders(store) == [0, 1, 2, 3, 4]


def test_renumbers_entire_collection_even_for_subset():
    store, ids = _store(4)
    store.assign_orders({ids[0]: 10, ids[1]: 20, ids[2]: 30, ids[3]: 40})

    reorder(store, [ids[3], ids[2]])

    assert _orders(store) == [0, 1, 2, 3]
    assert _display_order(store) == [ids[0], ids[1], ids[3], ids[2]]


def test_heals_duplicate_orders():
    store, ids = _store(4)
    store.assign_orders({id: 0 for id in ids})

    reorder(store, [ids[2]])

    assert not has_order_conflicts(store.all())
    assert _orders(store) == [0, 1, 2, 3]


def test_empty_sequence_is_noop():
    store, ids = _store(3)
    store.assign_orders({ids[0]: 5})

    assert reorder(store, []) == 0
    assert store.get(ids[0]).order == 5


def test_unknown_ids_are_ignored_and_collection_renumbered():
    store, ids = _store(3)
    store.assign_orders({ids[0]: 7, ids[1]: 8, ids[2]: 9})

    reorder(store, ["headline-404", "headline-405"])

    assert _display_order(store) == ids
    assert _orders(store) == [0, 1, 2]


def test_repeated_ids_keep_first_position():
    store, ids = _store(3)

    reorder(store, [ids[2], ids[0], ids[2], ids[1]])

    assert _display_order(store) == [ids[2], ids[0], ids[1]]


def test_repeated_calls_are_stable():
    store, ids = _store(5)
    wanted = [ids[2], ids[4], ids[0], ids[1], ids[3]]

    reorder(store, wanted)
    changed = reorder(store, wanted)

    assert changed == 0
    assert _display_order(store) == wanted


def test_total_order_holds_across_random_operations():
    rng = random.Random(1234)
    store, ids = _store(8)

    for step in range(60):
        action = rng.choice(["reorder", "insert", "delete"])
        current = _display_order(store)
        if action == "reorder" and current:
            start = rng.randrange(len(current))
            window = current[start:start + rng.randint(1, 4)]
            rng.shuffle(window)
            reorder(store, window)
        elif action == "insert":
            store.insert(
                HeadlineDraft(
                    main_title=f"Extra {step}",
                    categories=["category-1"],
                    publish_date=datetime(2026, 1, 1),
                )
            )
        elif current:
            store.delete(rng.choice(current))

        assert not has_order_conflicts(store.all())


def test_renumber_compacts_gaps():
    store, ids = _store(3)
    store.assign_orders({ids[0]: 4, ids[1]: 9, ids[2]: 1})

    renumber(store)

    assert [store.get(id).order for id in ids] == [1, 2, 0]
