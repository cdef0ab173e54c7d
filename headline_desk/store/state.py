"""
Persisted state layout for the headline repository.

A single structured record holds the category list, the headline list and
the next-id counters for both entity types, so that a fresh process resumes
exactly where the last successful write left off:

    {
      "version": 1,
      "next_ids": {"category": 7, "headline": 26},
      "categories": [{"id": ..., "name": ...}, ...],
      "headlines": [{"id": ..., "main_title": ..., "order": ...}, ...]
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.types import Category, Headline

STATE_VERSION = 1


@dataclass
class StoreState:
    """In-memory form of the persisted record.

    ``revision`` is not persisted; stores bump it on every real change so
    the repository can skip durable writes for no-op mutations.
    """

    categories: list[Category] = field(default_factory=list)
    headlines: list[Headline] = field(default_factory=list)
    next_category_id: int = 1
    next_headline_id: int = 1
    revision: int = 0

    def copy(self) -> StoreState:
        return StoreState(
            categories=[Category(id=c.id, name=c.name) for c in self.categories],
            headlines=[h.copy() for h in self.headlines],
            next_category_id=self.next_category_id,
            next_headline_id=self.next_headline_id,
            revision=self.revision,
        )

    def touch(self) -> None:
        self.revision += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": STATE_VERSION,
            "next_ids": {
                "category": self.next_category_id,
                "headline": self.next_headline_id,
            },
            "categories": [c.to_dict() for c in self.categories],
            "headlines": [h.to_dict() for h in self.headlines],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoreState:
        next_ids = data.get("next_ids") or {}
        categories = [Category.from_dict(item) for item in data.get("categories") or []]
        headlines = [Headline.from_dict(item) for item in data.get("headlines") or []]
        return cls(
            categories=categories,
            headlines=headlines,
            next_category_id=int(next_ids.get("category", len(categories) + 1)),
            next_headline_id=int(next_ids.get("headline", len(headlines) + 1)),
        )
