"""
Headline repository façade.

This is the only entry point that mutates categories and headlines. It
composes the Category Store, Headline Store, Query Engine and Ordering
Engine, and guarantees:

1. Mutations are serialized by a lock and built on a private copy of the
   state.
2. The copy is durably written through the backend before it is published;
   a failed write discards the copy (rollback) and the mutation is retried
   a bounded number of times.
3. Readers grab the published state reference without locking, so they see
   either the pre- or post-mutation state, never a partial write.
4. Expected failures come back as OperationResult values, never as raised
   RepositoryError exceptions.
"""

from __future__ import annotations

import logging
from pathlib import Path
import threading
import time
from typing import Any, Callable, Sequence

from .config import StorageConfig, get_store_path
from .core.errors import PersistenceFailure, RepositoryError, ValidationError
from .core.types import (
    Category,
    FieldError,
    Headline,
    HeadlineDraft,
    HeadlineFilters,
    HeadlineState,
    HeadlineUpdate,
    OperationResult,
    QueryResult,
)
from .logging_utils import log_event
from .ordering import has_order_conflicts, renumber, reorder
from .query import query
from .store import CategoryStore, HeadlineStore, JsonFileBackend, StateBackend, StoreState
from .validation import validate_category_name, validate_draft, validate_state, validate_update

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_NAMES = [
    "Technology",
    "Sports",
    "Business",
    "World News",
    "Local Events",
    "Breaking News",
]

Mutation = Callable[[CategoryStore, HeadlineStore], Any]


class HeadlineRepository:
    """Single-writer repository over categories and headlines.

    Construct one per process and pass it explicitly to whatever serves
    requests; call ``close`` (or use it as a context manager) on shutdown.

    Attributes:
        backend: Durable storage for the state
    """

    def __init__(
        self,
        backend: StateBackend,
        retries: int = 2,
        retry_backoff_seconds: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.backend = backend
        self._retries = max(0, retries)
        self._backoff = retry_backoff_seconds
        self._sleep = sleep
        self._lock = threading.Lock()
        self._closed = False

        state = backend.load() or StoreState()
        if has_order_conflicts(state.headlines):
            changed = renumber(HeadlineStore(state))
            log_event(
                logger,
                "Duplicate order values found on load; renumbered",
                level=logging.WARNING,
                changed=changed,
            )
        self._state = state

    @classmethod
    def open(cls, cfg: StorageConfig, path: Path | None = None) -> HeadlineRepository:
        """Open a JSON-file-backed repository from storage config."""
        store_path = Path(path) if path is not None else Path(get_store_path(cfg))
        return cls(
            JsonFileBackend(store_path),
            retries=cfg.retries,
            retry_backoff_seconds=cfg.retry_backoff_seconds,
        )

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> HeadlineRepository:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Reads

    def list_categories(self) -> list[Category]:
        return CategoryStore(self._state).list()

    def get_headline(self, id: str) -> Headline | None:
        store = HeadlineStore(self._state)
        if not store.exists(id):
            return None
        return store.get(id)

    def query_headlines(
        self,
        filters: HeadlineFilters | None = None,
        page: int = 0,
        page_size: int = 0,
    ) -> QueryResult:
        return query(HeadlineStore(self._state).all(), filters, page, page_size)

    # Categories

    def create_category(self, name: str) -> OperationResult:
        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> Category:
            return categories.create(validate_category_name(name))

        return self._mutate("create_category", mutation)

    def rename_category(self, id: str, name: str) -> OperationResult:
        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> Category:
            return categories.rename(id, validate_category_name(name))

        return self._mutate("rename_category", mutation)

    def delete_category(self, id: str) -> OperationResult:
        """Delete a category and strip it from every headline. Idempotent."""
        result = self._mutate("delete_category", lambda categories, headlines: categories.delete(id))
        if result.ok and not result.value:
            result.message = f"Category with ID {id!r} not found; nothing deleted."
        return result

    def seed_default_categories(self) -> OperationResult:
        """Create the default categories when the store has none."""

        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> list[Category]:
            if categories.list():
                return []
            return [categories.create(name) for name in DEFAULT_CATEGORY_NAMES]

        return self._mutate("seed_default_categories", mutation)

    # Headlines

    def create_headline(self, draft: HeadlineDraft) -> OperationResult:
        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> str:
            return headlines.insert(validate_draft(draft, categories.exists))

        return self._mutate("create_headline", mutation)

    def update_headline(self, id: str, update: HeadlineUpdate) -> OperationResult:
        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> Headline:
            checked = validate_update(update, categories.exists)
            return headlines.update(id, checked)

        return self._mutate("update_headline", mutation)

    def delete_headline(self, id: str) -> OperationResult:
        """Delete one headline. Deleting an absent id succeeds."""
        result = self._mutate("delete_headline", lambda categories, headlines: headlines.delete(id))
        if result.ok and not result.value:
            result.message = f"Headline with ID {id!r} not found; nothing deleted."
        return result

    def bulk_delete_headlines(self, ids: Sequence[str]) -> OperationResult:
        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> int:
            _check_ids("ids", ids)
            return headlines.bulk_delete(ids)

        return self._mutate("bulk_delete_headlines", mutation)

    def bulk_set_headline_state(self, ids: Sequence[str], state: HeadlineState | str) -> OperationResult:
        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> int:
            _check_ids("ids", ids)
            return headlines.bulk_set_state(ids, validate_state(state))

        return self._mutate("bulk_set_headline_state", mutation)

    def reorder_headlines(self, ordered_ids: Sequence[str]) -> OperationResult:
        def mutation(categories: CategoryStore, headlines: HeadlineStore) -> int:
            _check_ids("ordered_ids", ordered_ids)
            return reorder(headlines, ordered_ids)

        return self._mutate("reorder_headlines", mutation)

    # Internals

    def _mutate(self, action: str, mutation: Mutation) -> OperationResult:
        if self._closed:
            raise RuntimeError("Repository is closed")

        with self._lock:
            attempts = self._retries + 1
            last_error: PersistenceFailure | None = None
            for attempt in range(attempts):
                working = self._state.copy()
                headlines = HeadlineStore(working)
                categories = CategoryStore(working, on_delete=headlines.remove_category_reference)
                try:
                    value = mutation(categories, headlines)
                except RepositoryError as exc:
                    log_event(
                        logger,
                        "Mutation rejected",
                        level=logging.WARNING,
                        action=action,
                        status=exc.status,
                        detail=str(exc),
                    )
                    return _result_from_error(exc)

                if working.revision == self._state.revision:
                    return OperationResult(value=value)

                try:
                    self.backend.save(working)
                except PersistenceFailure as exc:
                    last_error = exc
                    log_event(
                        logger,
                        "Durable write failed; state rolled back",
                        level=logging.WARNING,
                        action=action,
                        attempt=attempt + 1,
                        detail=str(exc),
                    )
                    if attempt < attempts - 1:
                        self._sleep(self._backoff * (attempt + 1))
                    continue

                self._state = working
                log_event(logger, "Mutation committed", action=action, attempt=attempt + 1)
                return OperationResult(value=value)

        log_event(logger, "Giving up after failed durable writes", level=logging.ERROR, action=action, attempts=attempts)
        return OperationResult(
            status=PersistenceFailure.status,
            message=f"Could not save changes: {last_error}",
        )


def _check_ids(field_name: str, ids: Any) -> None:
    if isinstance(ids, str) or not isinstance(ids, (list, tuple, set)):
        raise ValidationError([FieldError(field_name, "Expected a list of IDs")])
    if any(not isinstance(id, str) for id in ids):
        raise ValidationError([FieldError(field_name, "Every ID must be a string")])


def _result_from_error(exc: RepositoryError) -> OperationResult:
    errors = exc.errors if isinstance(exc, ValidationError) else []
    return OperationResult(status=exc.status, errors=list(errors), message=str(exc))
