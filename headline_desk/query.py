"""
Query Engine: filter, sort and paginate a snapshot of headlines.

Pure functions only. Callers pass copies; nothing here touches a store.

Filter precedence: a non-empty ``ids`` filter returns exactly those
headlines and disables every other predicate as well as pagination.
Otherwise states, category, search and breaking flag are ANDed together.
"""

from __future__ import annotations

from typing import Iterable

from .core.types import Headline, HeadlineFilters, HeadlineState, QueryResult


def query(
    headlines: Iterable[Headline],
    filters: HeadlineFilters | None = None,
    page: int = 0,
    page_size: int = 0,
) -> QueryResult:
    """Apply filters, sort by order and paginate.

    Args:
        headlines: Snapshot of headline records
        filters: Filters to apply, None for no filtering
        page: 1-based page number; 0 disables pagination
        page_size: Items per page; 0 disables pagination

    Returns:
        QueryResult whose total_count is the filtered size before pagination
    """
    filters = filters or HeadlineFilters()
    by_ids = bool(filters.ids)

    if by_ids:
        wanted = set(filters.ids)
        matched = [h for h in headlines if h.id in wanted]
    else:
        allowed = _parse_states(filters.states) if filters.states else None
        matched = [h for h in headlines if _matches(h, filters, allowed)]

    # sorted() is stable, so equal orders keep snapshot order
    matched = sorted(matched, key=lambda h: h.order)
    total = len(matched)

    if page > 0 and page_size > 0 and not by_ids:
        start = (page - 1) * page_size
        matched = matched[start:start + page_size]

    return QueryResult(items=[h.copy() for h in matched], total_count=total)


def _matches(headline: Headline, filters: HeadlineFilters, allowed: set[HeadlineState] | None) -> bool:
    if allowed is not None and headline.state not in allowed:
        return False
    if filters.category and filters.category not in headline.categories:
        return False
    if filters.search:
        term = filters.search.lower()
        if term not in headline.main_title.lower() and term not in headline.subtitle.lower():
            return False
    if filters.is_breaking is not None and headline.is_breaking != filters.is_breaking:
        return False
    return True


def _parse_states(states: Iterable[HeadlineState | str]) -> set[HeadlineState]:
    # Unknown state names match nothing rather than raising.
    allowed = set()
    for state in states:
        try:
            allowed.add(HeadlineState.parse(state))
        except ValueError:
            continue
    return allowed
