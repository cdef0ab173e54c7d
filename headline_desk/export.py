"""
Export a selection of headlines as CSV or plain text.

The exporter only reads: it fetches the full (unpaginated) query result
from the repository and formats it. Category ids are shown by name where
the category still exists.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
import io
from pathlib import Path
import re
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .core.types import Category, Headline, HeadlineFilters, HeadlineState

if TYPE_CHECKING:
    from .repository import HeadlineRepository

CSV_HEADERS = [
    "ID",
    "Main Title",
    "Subtitle",
    "Categories",
    "State",
    "Priority",
    "Display Lines",
    "Publish Date",
    "Publish Time",
    "Is Breaking",
    "Order",
]

CONTENT_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "txt": "text/plain; charset=utf-8",
}

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass
class ExportResult:
    """Formatted export payload.

    Attributes:
        content: The exported text
        filename: Suggested download filename
        content_type: MIME type with charset
        count: Number of headlines exported
    """
    content: str
    filename: str
    content_type: str
    count: int


def export_headlines(
    repo: HeadlineRepository,
    fmt: str = "csv",
    ids: list[str] | None = None,
    states: list[HeadlineState | str] | None = None,
    search: str | None = None,
    is_breaking: bool | None = None,
    default_states: list[str] | None = None,
    now: datetime | None = None,
) -> ExportResult:
    """Export headlines matching a selection.

    Explicit ids take precedence over every other filter. Without ids, the
    given states are used, falling back to ``default_states``. Unknown state names are dropped.

    Raises:
        ValueError: If the format is unknown, or no ids and no valid state
            names were given
    """
    fmt = fmt.lower()
    if fmt not in CONTENT_TYPES:
        raise ValueError(f"Unsupported export format: {fmt}. Supported: csv, txt")

    export_states = None if ids else _valid_states(states or default_states or ["Approved"])
    filters = HeadlineFilters(ids=ids or None, states=export_states, search=search, is_breaking=is_breaking)
    headlines = repo.query_headlines(filters, page=0, page_size=0).items
    category_names = _category_map(repo.list_categories())

    if fmt == "txt":
        content = render_txt(headlines, category_names)
    else:
        content = render_csv(headlines, category_names)

    return ExportResult(
        content=content,
        filename=export_filename(fmt, ids, export_states, now or datetime.now()),
        content_type=CONTENT_TYPES[fmt],
        count=len(headlines),
    )


def render_csv(headlines: list[Headline], category_names: dict[str, str]) -> str:
    if not headlines:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for headline in headlines:
        writer.writerow(
            [
                headline.id,
                headline.main_title,
                headline.subtitle,
                _join_categories(headline.categories, category_names),
                headline.state.value,
                headline.priority.value,
                headline.display_lines,
                headline.publish_date.strftime("%Y-%m-%d"),
                headline.publish_date.strftime("%H:%M"),
                "Yes" if headline.is_breaking else "No",
                headline.order,
            ]
        )
    return buffer.getvalue().rstrip("\n")


def render_txt(headlines: list[Headline], category_names: dict[str, str]) -> str:
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["category_names"] = lambda ids: _join_categories(ids, category_names)
    template = env.get_template("headlines.txt.j2")
    return template.render(headlines=headlines).strip()


def export_filename(
    fmt: str,
    ids: list[str] | None,
    states: list[HeadlineState | str] | None,
    now: datetime,
) -> str:
    timestamp = now.strftime("%Y%m%d%H%M")
    if ids:
        base = f"headlines_selection_{timestamp}"
    else:
        labels = [_state_label(state) for state in (states or ["all"])]
        base = f"headlines_{'_'.join(labels)}_{timestamp}"
    filename = _UNSAFE_FILENAME_RE.sub("_", f"{base}.{fmt}")
    return filename.replace("__", "_")


def _valid_states(states: list[HeadlineState | str]) -> list[HeadlineState]:
    valid: list[HeadlineState] = []
    for state in states:
        try:
            parsed = HeadlineState.parse(state)
        except ValueError:
            continue
        if parsed not in valid:
            valid.append(parsed)
    if not valid:
        allowed = ", ".join(member.value for member in HeadlineState)
        raise ValueError(f"No valid states provided for export. Valid states: {allowed}")
    return valid


def _state_label(state: HeadlineState | str) -> str:
    return state.value if isinstance(state, HeadlineState) else str(state)


def _category_map(categories: list[Category]) -> dict[str, str]:
    return {category.id: category.name for category in categories}


def _join_categories(ids: list[str], category_names: dict[str, str]) -> str:
    return ", ".join(category_names.get(id, id) for id in ids)
