"""
Command-line interface for the headline desk.

Uses Typer to expose every repository operation (categories, headlines,
bulk actions, reordering, queries and exports). Supports loading .env files
for the store and config locations.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import os
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, load_config
from .core.types import Headline, HeadlineDraft, HeadlineFilters, HeadlineUpdate, OperationResult
from .export import export_headlines
from .logging_utils import setup_logging
from .repository import HeadlineRepository

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S"]

FAILURE_TITLES = {
    "not_found": "Not found",
    "duplicate_name": "Name already exists",
    "validation_error": "Invalid input",
    "persistence_failure": "Could not save changes, try again",
}


@dataclass
class CliState:
    cfg: AppConfig
    store: Path | None


@app.callback()
def main(
    ctx: typer.Context,
    store: Path | None = typer.Option(
        None, "--store", "-s", help="Store file (or set HEADLINE_DESK_STORE / .env)."
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="YAML config file (or set HEADLINE_DESK_CONFIG)."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Manage editorial headlines and categories."""
    load_dotenv()

    config_path = config or os.getenv("HEADLINE_DESK_CONFIG")
    cfg = load_config(str(config_path) if config_path else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging, Path(cfg.logging.directory))

    ctx.obj = CliState(cfg=cfg, store=store)


@app.command("categories")
def list_categories(ctx: typer.Context):
    """List all categories."""
    repo = _open(ctx)
    table = Table("ID", "Name")
    for category in repo.list_categories():
        table.add_row(category.id, escape(category.name))
    console.print(table)


@app.command("add-category")
def add_category(ctx: typer.Context, name: str = typer.Argument(...)):
    """Create a category."""
    result = _check(_open(ctx).create_category(name))
    console.print(f"Created category {result.value.id} ({escape(result.value.name)})")


@app.command("rename-category")
def rename_category(
    ctx: typer.Context,
    id: str = typer.Argument(...),
    name: str = typer.Argument(...),
):
    """Rename a category."""
    result = _check(_open(ctx).rename_category(id, name))
    console.print(f"Renamed category {result.value.id} to {escape(result.value.name)}")


@app.command("delete-category")
def delete_category(ctx: typer.Context, id: str = typer.Argument(...)):
    """Delete a category and remove it from every headline."""
    result = _check(_open(ctx).delete_category(id))
    console.print(escape(result.message) if result.message else f"Deleted category {id}")


@app.command("seed")
def seed(ctx: typer.Context):
    """Create the default categories in an empty store."""
    result = _check(_open(ctx).seed_default_categories())
    console.print(f"Seeded {len(result.value)} categories")


@app.command("add")
def add_headline(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", "-t", help="Main title."),
    subtitle: str = typer.Option("", "--subtitle"),
    category: list[str] = typer.Option(..., "--category", help="Category ID; repeat for several."),
    state: str = typer.Option("Draft", "--state"),
    priority: str = typer.Option("Normal", "--priority"),
    lines: int = typer.Option(1, "--lines", help="Display lines (1-3)."),
    publish: datetime | None = typer.Option(None, "--publish", formats=DATE_FORMATS),
    breaking: bool = typer.Option(False, "--breaking/--not-breaking"),
):
    """Create a headline; it is placed after all existing headlines."""
    draft = HeadlineDraft(
        main_title=title,
        subtitle=subtitle,
        categories=list(category),
        state=state,
        priority=priority,
        display_lines=lines,
        publish_date=publish or datetime.now().replace(second=0, microsecond=0),
        is_breaking=breaking,
    )
    result = _check(_open(ctx).create_headline(draft))
    console.print(f"Created headline {result.value}")


@app.command("update")
def update_headline(
    ctx: typer.Context,
    id: str = typer.Argument(...),
    title: str | None = typer.Option(None, "--title", "-t"),
    subtitle: str | None = typer.Option(None, "--subtitle"),
    category: list[str] | None = typer.Option(None, "--category"),
    state: str | None = typer.Option(None, "--state"),
    priority: str | None = typer.Option(None, "--priority"),
    lines: int | None = typer.Option(None, "--lines"),
    publish: datetime | None = typer.Option(None, "--publish", formats=DATE_FORMATS),
    breaking: bool | None = typer.Option(None, "--breaking/--not-breaking"),
):
    """Change only the given fields of a headline."""
    update = HeadlineUpdate(
        main_title=title,
        subtitle=subtitle,
        categories=list(category) if category else None,
        state=state,
        priority=priority,
        display_lines=lines,
        publish_date=publish,
        is_breaking=breaking,
    )
    _check(_open(ctx).update_headline(id, update))
    console.print(f"Updated headline {id}")


@app.command("delete")
def delete_headlines(ctx: typer.Context, ids: list[str] = typer.Argument(...)):
    """Delete one or more headlines. Unknown ids are skipped."""
    result = _check(_open(ctx).bulk_delete_headlines(ids))
    console.print(f"Deleted {result.value} headline(s)")


@app.command("set-state")
def set_state(
    ctx: typer.Context,
    state: str = typer.Argument(..., help="Draft, In Review, Approved or Archived."),
    ids: list[str] = typer.Argument(...),
):
    """Move headlines to a workflow state."""
    result = _check(_open(ctx).bulk_set_headline_state(ids, state))
    console.print(f"Updated state for {result.value} headline(s)")


@app.command("reorder")
def reorder_headlines(ctx: typer.Context, ids: list[str] = typer.Argument(...)):
    """Reorder headlines: the given ids take the given relative order."""
    _check(_open(ctx).reorder_headlines(ids))
    console.print(f"Reordered {len(ids)} headline(s)")


@app.command("list")
def list_headlines(
    ctx: typer.Context,
    id: list[str] | None = typer.Option(None, "--id", help="Only these ids; overrides other filters."),
    state: list[str] | None = typer.Option(None, "--state"),
    category: str | None = typer.Option(None, "--category"),
    search: str | None = typer.Option(None, "--search"),
    breaking: bool | None = typer.Option(None, "--breaking/--not-breaking"),
    page: int = typer.Option(1, "--page"),
    page_size: int = typer.Option(10, "--page-size", help="0 lists everything."),
):
    """List headlines in display order."""
    repo = _open(ctx)
    filters = HeadlineFilters(
        ids=list(id) if id else None,
        states=list(state) if state else None,
        category=category,
        search=search,
        is_breaking=breaking,
    )
    result = repo.query_headlines(filters, page=page, page_size=page_size)
    names = {c.id: c.name for c in repo.list_categories()}

    table = Table("Order", "ID", "Title", "Categories", "State", "Priority", "Breaking")
    for headline in result.items:
        table.add_row(*_row(headline, names))
    console.print(table)
    pages = result.page_count(page_size)
    console.print(f"{result.total_count} headline(s), page {page} of {max(pages, 1)}")


@app.command("export")
def export(
    ctx: typer.Context,
    fmt: str = typer.Option("csv", "--format", "-f", help="csv or txt."),
    id: list[str] | None = typer.Option(None, "--id"),
    state: list[str] | None = typer.Option(None, "--state"),
    search: str | None = typer.Option(None, "--search"),
    breaking: bool | None = typer.Option(None, "--breaking/--not-breaking"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file or directory."),
):
    """Export headlines to a CSV or text file."""
    state_obj: CliState = ctx.obj
    try:
        exported = export_headlines(
            _open(ctx),
            fmt,
            ids=list(id) if id else None,
            states=list(state) if state else None,
            search=search,
            is_breaking=breaking,
            default_states=state_obj.cfg.export.default_states,
        )
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    target = output or Path(state_obj.cfg.export.directory)
    if target.is_dir() or target.suffix == "":
        target = target / exported.filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(exported.content, encoding="utf-8")
    console.print(f"Exported {exported.count} headline(s) to {target}")


def _open(ctx: typer.Context) -> HeadlineRepository:
    state: CliState = ctx.obj
    return HeadlineRepository.open(state.cfg.storage, state.store)


def _check(result: OperationResult) -> OperationResult:
    if result.ok:
        return result
    title = FAILURE_TITLES.get(result.status, "Failed")
    console.print(f"[red]{title}:[/red] {escape(result.message or '')}")
    for error in result.errors:
        console.print(f"  - {escape(str(error))}")
    raise typer.Exit(code=1)


def _row(headline: Headline, names: dict[str, str]) -> list[str]:
    return [
        str(headline.order),
        headline.id,
        escape(headline.main_title),
        escape(", ".join(names.get(c, c) for c in headline.categories)),
        headline.state.value,
        headline.priority.value,
        "Yes" if headline.is_breaking else "No",
    ]


if __name__ == "__main__":
    app()
