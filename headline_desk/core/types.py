"""
Core data types for the headline desk.

This module defines the records owned by the repository and the request
shapes callers pass in:
- Category: A named tag attached to headlines
- Headline: A single editorial item with workflow state and display order
- HeadlineDraft: Input for creating a headline (no id, no order)
- HeadlineUpdate: Partial update, every field independently optional
- HeadlineFilters: Query filters accepted by the Query Engine
- QueryResult: One page of headlines plus the unpaginated total
- OperationResult: Typed outcome returned by the repository façade
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
import math
from typing import Any


def _compact(value: str) -> str:
    return "".join(value.split()).lower()


class HeadlineState(str, Enum):
    """Workflow stage of a headline. Any state is reachable from any state."""

    DRAFT = "Draft"
    IN_REVIEW = "In Review"
    APPROVED = "Approved"
    ARCHIVED = "Archived"

    @classmethod
    def parse(cls, value: HeadlineState | str) -> HeadlineState:
        """Parse a state from its display value or compact name.

        "In Review", "InReview" and "in review" all map to IN_REVIEW.

        Raises:
            ValueError: If the value names no state
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = _compact(value)
            for member in cls:
                if _compact(member.value) == wanted or member.name.replace("_", "").lower() == wanted:
                    return member
        raise ValueError(f"Unknown headline state: {value!r}")


class HeadlinePriority(str, Enum):
    HIGH = "High"
    NORMAL = "Normal"

    @classmethod
    def parse(cls, value: HeadlinePriority | str) -> HeadlinePriority:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = _compact(value)
            for member in cls:
                if _compact(member.value) == wanted:
                    return member
        raise ValueError(f"Unknown headline priority: {value!r}")


ALL_HEADLINE_STATES: list[HeadlineState] = list(HeadlineState)


@dataclass
class Category:
    """A named tag that can be attached to many headlines.

    Attributes:
        id: Opaque unique identifier (e.g., "category-7")
        name: Display name, unique case-insensitively
    """
    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(id=str(data["id"]), name=str(data["name"]))


@dataclass
class Headline:
    """A single editorial headline.

    Attributes:
        id: Opaque unique identifier, never reused
        main_title: The primary title, non-empty
        subtitle: Secondary title, may be empty
        categories: Category ids, no duplicates
        state: Workflow state
        priority: High or Normal
        display_lines: Rendering hint in [1, 3]
        publish_date: Scheduled publication timestamp
        is_breaking: Whether the headline is marked as breaking news
        order: Position in the global manual display order
    """
    id: str
    main_title: str
    subtitle: str
    categories: list[str]
    state: HeadlineState
    priority: HeadlinePriority
    display_lines: int
    publish_date: datetime
    is_breaking: bool
    order: int

    def copy(self) -> Headline:
        return replace(self, categories=list(self.categories))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "main_title": self.main_title,
            "subtitle": self.subtitle,
            "categories": list(self.categories),
            "state": self.state.value,
            "priority": self.priority.value,
            "display_lines": self.display_lines,
            "publish_date": self.publish_date.isoformat(),
            "is_breaking": self.is_breaking,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Headline:
        return cls(
            id=str(data["id"]),
            main_title=data["main_title"],
            subtitle=data.get("subtitle") or "",
            categories=list(data.get("categories") or []),
            state=HeadlineState.parse(data["state"]),
            priority=HeadlinePriority.parse(data["priority"]),
            display_lines=int(data["display_lines"]),
            publish_date=datetime.fromisoformat(data["publish_date"]),
            is_breaking=bool(data.get("is_breaking", False)),
            order=int(data["order"]),
        )


@dataclass
class HeadlineDraft:
    """Input for creating a headline. The store assigns id and order.

    Enum fields accept raw strings so that invalid values reach validation
    and are reported as field errors instead of failing at construction.
    """
    main_title: str
    categories: list[str]
    publish_date: datetime
    subtitle: str | None = ""
    state: HeadlineState | str = HeadlineState.DRAFT
    priority: HeadlinePriority | str = HeadlinePriority.NORMAL
    display_lines: int = 1
    is_breaking: bool = False


@dataclass
class HeadlineUpdate:
    """Partial headline update. None means "leave unchanged".

    There is deliberately no ``order`` field: order only changes through
    the Ordering Engine.
    """
    main_title: str | None = None
    subtitle: str | None = None
    categories: list[str] | None = None
    state: HeadlineState | str | None = None
    priority: HeadlinePriority | str | None = None
    display_lines: int | None = None
    publish_date: datetime | None = None
    is_breaking: bool | None = None

    def provided(self) -> dict[str, Any]:
        """Return only the fields that were set."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def is_empty(self) -> bool:
        return not self.provided()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeadlineUpdate:
        """Build an update from a loose mapping.

        Unknown keys, including ``order`` and ``id``, are dropped.
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if isinstance(values.get("publish_date"), str):
            values["publish_date"] = datetime.fromisoformat(values["publish_date"])
        return cls(**values)


@dataclass
class HeadlineFilters:
    """Filters for querying headlines.

    When ``ids`` is non-empty it overrides every other field.

    Attributes:
        ids: Exact set of headline ids to return
        states: Allowed workflow states
        category: Single category id that must be attached
        search: Case-insensitive substring of main title or subtitle
        is_breaking: Exact breaking flag, None for either
    """
    ids: list[str] | None = None
    states: list[HeadlineState | str] | None = None
    category: str | None = None
    search: str | None = None
    is_breaking: bool | None = None


@dataclass
class QueryResult:
    """One page of headlines and the size of the full filtered set."""
    items: list[Headline] = field(default_factory=list)
    total_count: int = 0

    def page_count(self, page_size: int) -> int:
        if page_size <= 0:
            return 1 if self.total_count else 0
        return math.ceil(self.total_count / page_size)


@dataclass
class FieldError:
    """A single field-level validation failure."""
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


@dataclass
class OperationResult:
    """Outcome of a repository operation.

    Attributes:
        status: "ok", "not_found", "duplicate_name", "validation_error",
                or "persistence_failure"
        value: Operation payload on success (new id, category, count, ...)
        errors: Field errors when status is "validation_error"
        message: Human-readable detail for failures and soft warnings
    """
    status: str = "ok"
    value: Any = None
    errors: list[FieldError] = field(default_factory=list)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"
