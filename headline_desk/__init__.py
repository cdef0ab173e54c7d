"""
Headline Desk - editorial headline repository.

This package manages editorial headlines and their categories: workflow
states, breaking flags, a manual global display order, filtered and
paginated queries, and CSV/text exports.

Main entry points are HeadlineRepository and the CLI via `headline-desk`.

Example:
    $ headline-desk seed
    $ headline-desk add -t "Markets rally" --category category-3
"""

__all__ = [
    "__version__",
    "HeadlineRepository",
    "HeadlineDraft",
    "HeadlineUpdate",
    "HeadlineFilters",
    "HeadlineState",
    "HeadlinePriority",
    "export_headlines",
]
__version__ = "0.1.0"

from .core.types import HeadlineDraft, HeadlineFilters, HeadlinePriority, HeadlineState, HeadlineUpdate
from .export import export_headlines
from .repository import HeadlineRepository
