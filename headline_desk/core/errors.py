"""
Error taxonomy for the headline repository.

Stores raise these; the repository façade turns them into OperationResult
values keyed by ``status`` so callers can tell failure kinds apart.
"""

from __future__ import annotations

from .types import FieldError


class RepositoryError(Exception):
    """Base class for all expected repository failures."""

    status = "error"


class NotFound(RepositoryError):
    status = "not_found"

    def __init__(self, kind: str, id: str):
        self.kind = kind
        self.id = id
        super().__init__(f"{kind} with ID {id!r} not found.")


class DuplicateName(RepositoryError):
    status = "duplicate_name"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Category with name {name!r} already exists.")


class ValidationError(RepositoryError):
    """One or more field-level violations, all reported together."""

    status = "validation_error"

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(str(error) for error in self.errors) or "Invalid input.")


class PersistenceFailure(RepositoryError):
    """The durable write did not happen; the mutation did not take effect."""

    status = "persistence_failure"
