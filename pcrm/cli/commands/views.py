"""
FILE: pcrm/cli/commands/views.py
PURPOSE: Board views (ls = table, grid, cal = calendar, stats = metrics)
NOTES:
  - Each command builds a ViewState from its options and renders one projection
  - Metrics and the calendar always use the full task list
"""

import json
from datetime import date
from typing import List, Optional

import typer

from ..main import app, console, error_console
from ...config import get_settings
from ...core import service
from ...core.constants import STATUS_ALL, DEFAULT_SORT_KEY, CALENDAR_MONTH
from ...core.exceptions import InvalidInputError, PcrmError
from ...core.views import Projections, ViewState, project
from ...formatting import TaskFormatter


def build_view_state(
    categories: Optional[List[str]] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> ViewState:
    """
    Translate listing options into a ViewState.

    Raises:
        InvalidInputError: If a category, status or sort key is unknown
    """
    state = ViewState()
    if categories:
        state = state.with_categories(service.resolve_category(c) for c in categories)
    if status:
        state = state.with_status(service.resolve_status(status, allow_all=True))
    if search:
        state = state.with_query(search)
    if sort:
        state = state.with_sort(service.resolve_sort_key(sort))
    return state


def _project(state: ViewState) -> Projections:
    store = service.open_store()
    return project(store.tasks, state, due_soon_days=get_settings().due_soon_days)


@app.command()
def ls(
    category: Optional[List[str]] = typer.Option(None, "--category", "-c", help="Show only this category (repeatable)"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help=f"Status filter (default: {STATUS_ALL})"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Search title, description and next steps"),
    sort: Optional[str] = typer.Option(None, "--sort", help=f"Sort key: dueDate, createdAt, category (default: {DEFAULT_SORT_KEY})"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks as a table.

    Example:
        pcrm ls
        pcrm ls --category family --category personal
        pcrm ls --status pending --sort createdAt
        pcrm ls --search "trade-in" --json
    """
    try:
        projections = _project(build_view_state(category, status, search, sort))
        tasks = projections.visible

        if json_output:
            typer.echo(TaskFormatter.to_json_array(tasks))
        elif raw:
            for line in TaskFormatter.to_raw_lines(tasks):
                typer.echo(line)
        elif not tasks:
            console.print("[dim]No tasks match the current filters.[/dim]")
        else:
            console.print(TaskFormatter.create_table(tasks, title=f"Tasks ({len(tasks)})"))

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def grid(
    category: Optional[List[str]] = typer.Option(None, "--category", "-c", help="Show only this category (repeatable)"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help=f"Status filter (default: {STATUS_ALL})"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Search title, description and next steps"),
    sort: Optional[str] = typer.Option(None, "--sort", help=f"Sort key (default: {DEFAULT_SORT_KEY})"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show tasks grouped by category, one panel per category.

    Example:
        pcrm grid
        pcrm grid --status active
    """
    try:
        projections = _project(build_view_state(category, status, search, sort))
        groups = projections.by_category

        if json_output:
            data = {name: [t.to_dict() for t in tasks] for name, tasks in groups.items()}
            typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        elif raw:
            for name, tasks in groups.items():
                typer.echo(f"{name} ({len(tasks)})")
                for line in TaskFormatter.to_raw_lines(tasks):
                    typer.echo(f"  {line}")
        else:
            console.print(TaskFormatter.create_grid(groups))

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def cal(
    mode: str = typer.Option(CALENDAR_MONTH, "--mode", "-m", help="month, week or day"),
    on: Optional[str] = typer.Option(None, "--date", help="Date to show (YYYY-MM-DD, default: today)"),
    prev: bool = typer.Option(False, "--prev", help="Go back one month"),
    next_: bool = typer.Option(False, "--next", help="Go forward one month"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show the calendar. A task appears on its due date and on every next step date.

    Example:
        pcrm cal
        pcrm cal --next
        pcrm cal --mode week --date 2024-06-05
        pcrm cal --mode day
    """
    try:
        state = ViewState().with_calendar_mode(service.resolve_calendar_mode(mode))
        if on:
            state = state.with_cursor(date.fromisoformat(service.parse_due_date(on)))
        if prev:
            state = state.calendar_prev_month()
        if next_:
            state = state.calendar_next_month()

        calendar = _project(state).calendar

        if json_output:
            data = {
                "mode": calendar.mode,
                "cursor": calendar.cursor.isoformat(),
                "days": [
                    {
                        "date": cell.day.isoformat(),
                        "inMonth": cell.in_month,
                        "isToday": cell.is_today,
                        "tasks": [t.id for t in cell.tasks],
                        "overflow": cell.overflow,
                    }
                    for cell in calendar.days
                ],
            }
            typer.echo(json.dumps(data, indent=2))
        elif raw:
            for cell in calendar.days:
                titles = "; ".join(t.title for t in cell.tasks)
                typer.echo(f"{cell.day.isoformat()}: {titles or '-'}")
        else:
            console.print(TaskFormatter.create_calendar(calendar))

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show summary metrics over all tasks.

    Example:
        pcrm stats
        pcrm stats --json
    """
    try:
        due_soon_days = get_settings().due_soon_days
        metrics = _project(ViewState()).metrics

        if json_output:
            data = {
                "total": metrics.total,
                "overdue": metrics.overdue,
                "dueSoon": metrics.due_soon,
                "active": metrics.active,
                "counts": metrics.counts,
            }
            typer.echo(json.dumps(data, indent=2))
        elif raw:
            typer.echo(f"Total: {metrics.total}")
            typer.echo(f"Active: {metrics.active}")
            typer.echo(f"Due within {due_soon_days} days: {metrics.due_soon}")
            typer.echo(f"Overdue: {metrics.overdue}")
            for name, count in metrics.counts.items():
                typer.echo(f"{name}: {count}")
        else:
            console.print(TaskFormatter.create_metrics(metrics, due_soon_days))

    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
