"""
Durable storage backends for the repository state.

New backends should inherit from StateBackend and implement ``load`` and
``save``. ``save`` must either fully persist the state or raise
PersistenceFailure; a partial write must never become visible.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import os
from pathlib import Path
import tempfile

from ..core.errors import PersistenceFailure
from .state import StoreState


class StateBackend(ABC):
    """Abstract base class for state persistence."""

    @abstractmethod
    def load(self) -> StoreState | None:
        """Load the last committed state.

        Returns:
            The stored state, or None if nothing has been persisted yet
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, state: StoreState) -> None:
        """Durably persist the full state.

        Raises:
            PersistenceFailure: If the write did not complete
        """
        raise NotImplementedError


class JsonFileBackend(StateBackend):
    """Stores the state as one JSON document.

    Writes go to a temporary file in the target directory which is then
    renamed over the store file, so readers see either the old or the new
    document.

    Attributes:
        path: Location of the JSON store file
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> StoreState | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return StoreState.from_dict(raw)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise PersistenceFailure(f"Cannot read store file {self.path}: {exc}") from exc

    def save(self, state: StoreState) -> None:
        payload = json.dumps(state.to_dict(), indent=2, ensure_ascii=False)
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceFailure(f"Could not write store file {self.path}: {exc}") from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)


class MemoryBackend(StateBackend):
    """Keeps the serialized state in memory. Useful for tests and dry runs."""

    def __init__(self, initial: StoreState | None = None):
        self._data = initial.to_dict() if initial is not None else None
        self.save_count = 0

    def load(self) -> StoreState | None:
        if self._data is None:
            return None
        return StoreState.from_dict(json.loads(json.dumps(self._data)))

    def save(self, state: StoreState) -> None:
        self._data = json.loads(json.dumps(state.to_dict()))
        self.save_count += 1
