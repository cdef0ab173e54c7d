"""
Ordering Engine: keeps the global manual order of headlines total and unique.

A reorder request usually carries only the ids a client has loaded (one
page of a filtered list), while ``order`` is global. The engine places the
requested ids contiguously from the lowest order they currently hold, then
renumbers the entire collection 0..n-1. Renumbering everything on every
call is what clears duplicates left by stale or partial views.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .core.types import Headline
from .logging_utils import log_event
from .store.headlines import HeadlineStore, unique_ids

logger = logging.getLogger(__name__)


def reorder(store: HeadlineStore, ordered_ids: Sequence[str]) -> int:
    """Apply a caller's relative order to a subset and renumber all headlines.

    Args:
        store: Headline store to update
        ordered_ids: Desired relative order for some subset of headlines;
                     unknown ids are ignored, repeats keep the first position

    Returns:
        Number of headlines whose order value changed
    """
    requested = unique_ids(ordered_ids)
    if not requested:
        return 0

    snapshot = _sorted_by_order(store.all())
    current = {h.id: h.order for h in snapshot}
    subset = [id for id in requested if id in current]
    base = min((current[id] for id in subset), default=0)

    tentative = dict(current)
    for position, id in enumerate(subset):
        tentative[id] = base + position

    # Stable: ties fall back to the previous relative order.
    resequenced = sorted(snapshot, key=lambda h: tentative[h.id])
    changed = store.assign_orders({h.id: index for index, h in enumerate(resequenced)})
    log_event(
        logger,
        "Headlines reordered",
        requested=len(requested),
        matched=len(subset),
        base=base,
        changed=changed,
    )
    return changed


def renumber(store: HeadlineStore) -> int:
    """Renumber every headline 0..n-1 in current order."""
    resequenced = _sorted_by_order(store.all())
    return store.assign_orders({h.id: index for index, h in enumerate(resequenced)})


def has_order_conflicts(headlines: Iterable[Headline]) -> bool:
    """True if two headlines share an order value."""
    seen: set[int] = set()
    for headline in headlines:
        if headline.order in seen:
            return True
        seen.add(headline.order)
    return False


def _sorted_by_order(headlines: list[Headline]) -> list[Headline]:
    return sorted(headlines, key=lambda h: h.order)
