"""Category Store: identity and name records for headline categories."""

from __future__ import annotations

import logging
from typing import Callable

from ..core.errors import DuplicateName, NotFound
from ..core.types import Category
from ..logging_utils import log_event
from .state import StoreState

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Return the comparison key for a category name (trimmed, casefolded)."""
    return name.strip().casefold()


class CategoryStore:
    """Owns the category list inside a StoreState.

    Deleting a category invokes ``on_delete`` with the removed id so the
    Headline Store can strip the reference from every headline within the
    same mutation.
    """

    def __init__(self, state: StoreState, on_delete: Callable[[str], int] | None = None):
        self._state = state
        self._on_delete = on_delete

    def list(self) -> list[Category]:
        """All categories in insertion order, as copies."""
        return [Category(id=c.id, name=c.name) for c in self._state.categories]

    def get(self, id: str) -> Category:
        category = self._find(id)
        if category is None:
            raise NotFound("Category", id)
        return Category(id=category.id, name=category.name)

    def exists(self, id: str) -> bool:
        return self._find(id) is not None

    def create(self, name: str) -> Category:
        trimmed = name.strip()
        self._ensure_unique(trimmed, exclude_id=None)
        category = Category(id=f"category-{self._state.next_category_id}", name=trimmed)
        self._state.next_category_id += 1
        self._state.categories.append(category)
        self._state.touch()
        log_event(logger, "Category created", category_id=category.id, category_name=trimmed)
        return Category(id=category.id, name=category.name)

    def rename(self, id: str, name: str) -> Category:
        category = self._find(id)
        if category is None:
            raise NotFound("Category", id)
        trimmed = name.strip()
        self._ensure_unique(trimmed, exclude_id=id)
        if category.name != trimmed:
            category.name = trimmed
            self._state.touch()
        log_event(logger, "Category renamed", category_id=id, category_name=trimmed)
        return Category(id=category.id, name=category.name)

    def delete(self, id: str) -> bool:
        """Remove a category and cascade to headlines.

        Returns:
            True if the category existed, False for an idempotent no-op
        """
        remaining = [c for c in self._state.categories if c.id != id]
        if len(remaining) == len(self._state.categories):
            log_event(logger, "Category to delete not found", level=logging.WARNING, category_id=id)
            return False
        self._state.categories = remaining
        self._state.touch()
        cleaned = self._on_delete(id) if self._on_delete is not None else 0
        log_event(logger, "Category deleted", category_id=id, headlines_cleaned=cleaned)
        return True

    def _find(self, id: str) -> Category | None:
        for category in self._state.categories:
            if category.id == id:
                return category
        return None

    def _ensure_unique(self, name: str, exclude_id: str | None) -> None:
        key = normalize_name(name)
        for category in self._state.categories:
            if category.id != exclude_id and normalize_name(category.name) == key:
                raise DuplicateName(name)
