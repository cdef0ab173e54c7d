"""
Persisted stores for categories and headlines.

The stores operate on a StoreState; backends turn that state into a
durable record and back.
"""

from .backends import JsonFileBackend, MemoryBackend, StateBackend
from .categories import CategoryStore
from .headlines import HeadlineStore
from .state import StoreState

__all__ = [
    "CategoryStore",
    "HeadlineStore",
    "JsonFileBackend",
    "MemoryBackend",
    "StateBackend",
    "StoreState",
]
