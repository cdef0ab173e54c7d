"""Headline Store: the canonical headline records and their order field.

Every method hands out copies; the live records inside the StoreState
never leave this module.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..core.errors import NotFound
from ..core.types import Headline, HeadlineDraft, HeadlinePriority, HeadlineState, HeadlineUpdate
from ..logging_utils import log_event
from .state import StoreState

logger = logging.getLogger(__name__)


def unique_ids(ids: Iterable[str]) -> list[str]:
    """Drop duplicates while keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for id in ids:
        if id not in seen:
            seen.add(id)
            result.append(id)
    return result


class HeadlineStore:
    def __init__(self, state: StoreState):
        self._state = state

    def all(self) -> list[Headline]:
        """Copies of every headline in storage order."""
        return [h.copy() for h in self._state.headlines]

    def get(self, id: str) -> Headline:
        headline = self._find(id)
        if headline is None:
            raise NotFound("Headline", id)
        return headline.copy()

    def exists(self, id: str) -> bool:
        return self._find(id) is not None

    def max_order(self) -> int:
        """Highest order value, or -1 for an empty store."""
        return max((h.order for h in self._state.headlines), default=-1)

    def insert(self, draft: HeadlineDraft) -> str:
        """Add a headline after every existing one and return its new id."""
        headline = Headline(
            id=f"headline-{self._state.next_headline_id}",
            main_title=draft.main_title,
            subtitle=draft.subtitle or "",
            categories=unique_ids(draft.categories),
            state=HeadlineState.parse(draft.state),
            priority=HeadlinePriority.parse(draft.priority),
            display_lines=draft.display_lines,
            publish_date=draft.publish_date,
            is_breaking=draft.is_breaking,
            order=self.max_order() + 1,
        )
        self._state.next_headline_id += 1
        self._state.headlines.append(headline)
        self._state.touch()
        log_event(logger, "Headline created", headline_id=headline.id, order=headline.order)
        return headline.id

    def update(self, id: str, changes: HeadlineUpdate) -> Headline:
        """Merge the provided fields into an existing headline.

        ``HeadlineUpdate`` carries no order field, so order is untouched.
        """
        headline = self._find(id)
        if headline is None:
            raise NotFound("Headline", id)

        provided = changes.provided()
        if "categories" in provided:
            provided["categories"] = unique_ids(provided["categories"])
        if "state" in provided:
            provided["state"] = HeadlineState.parse(provided["state"])
        if "priority" in provided:
            provided["priority"] = HeadlinePriority.parse(provided["priority"])

        changed = [key for key, value in provided.items() if getattr(headline, key) != value]
        for key in changed:
            setattr(headline, key, provided[key])
        if changed:
            self._state.touch()
        log_event(logger, "Headline updated", headline_id=id, fields=sorted(changed))
        return headline.copy()

    def delete(self, id: str) -> bool:
        """Remove a headline. An absent id is a no-op and returns False."""
        removed = self.bulk_delete([id])
        if not removed:
            log_event(logger, "Headline to delete not found", level=logging.WARNING, headline_id=id)
        return removed > 0

    def bulk_delete(self, ids: Iterable[str]) -> int:
        targets = set(ids)
        remaining = [h for h in self._state.headlines if h.id not in targets]
        removed = len(self._state.headlines) - len(remaining)
        if removed:
            self._state.headlines = remaining
            self._state.touch()
        log_event(logger, "Headlines deleted", requested=len(targets), removed=removed)
        return removed

    def bulk_set_state(self, ids: Iterable[str], state: HeadlineState | str) -> int:
        """Set the workflow state on every matching headline.

        Returns:
            Number of matching headlines, including ones already in ``state``
        """
        new_state = HeadlineState.parse(state)
        targets = set(ids)
        touched = 0
        rewritten = 0
        for headline in self._state.headlines:
            if headline.id not in targets:
                continue
            touched += 1
            if headline.state != new_state:
                headline.state = new_state
                rewritten += 1
        if rewritten:
            self._state.touch()
        log_event(logger, "Headline states updated", state=new_state.value, touched=touched, rewritten=rewritten)
        return touched

    def remove_category_reference(self, category_id: str) -> int:
        """Strip a category id from every headline. Returns headlines changed."""
        cleaned = 0
        for headline in self._state.headlines:
            if category_id in headline.categories:
                headline.categories = [c for c in headline.categories if c != category_id]
                cleaned += 1
        if cleaned:
            self._state.touch()
        return cleaned

    def assign_orders(self, orders: dict[str, int]) -> int:
        """Overwrite order values. Only the Ordering Engine calls this."""
        changed = 0
        for headline in self._state.headlines:
            new_order = orders.get(headline.id)
            if new_order is not None and headline.order != new_order:
                headline.order = new_order
                changed += 1
        if changed:
            self._state.touch()
        return changed

    def _find(self, id: str) -> Headline | None:
        for headline in self._state.headlines:
            if headline.id == id:
                return headline
        return None
