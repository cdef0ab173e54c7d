"""
Core domain models and errors.

This package contains the record types and the error taxonomy shared by
the stores, the query and ordering engines, and the repository façade.
"""

from .types import (
    ALL_HEADLINE_STATES,
    Category,
    FieldError,
    Headline,
    HeadlineDraft,
    HeadlineFilters,
    HeadlinePriority,
    HeadlineState,
    HeadlineUpdate,
    OperationResult,
    QueryResult,
)
from .errors import (
    DuplicateName,
    NotFound,
    PersistenceFailure,
    RepositoryError,
    ValidationError,
)

__all__ = [
    "ALL_HEADLINE_STATES",
    "Category",
    "FieldError",
    "Headline",
    "HeadlineDraft",
    "HeadlineFilters",
    "HeadlinePriority",
    "HeadlineState",
    "HeadlineUpdate",
    "OperationResult",
    "QueryResult",
    "RepositoryError",
    "NotFound",
    "DuplicateName",
    "ValidationError",
    "PersistenceFailure",
]
