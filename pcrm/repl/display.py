"""
FILE: pcrm/repl/display.py
PURPOSE: Display functions for tasks and board views
EXPORTS:
  - display_task() - Display a single task line
  - display_view() - Render the active view (grid, table or calendar)
  - display_filters() - Show the active filters and sort key
DEPENDENCIES:
  - rich (formatted output)
  - pcrm.formatting (TaskFormatter)
  - pcrm.core.views (ViewState, Projections)
NOTES:
  - Accepts console as a parameter to avoid circular imports with repl.main
"""

from datetime import date
from typing import Optional

from rich.console import Console

from ..core.constants import CATEGORIES, VIEW_CALENDAR, VIEW_TABLE
from ..core.models import Task
from ..core.views import Projections, ViewState
from ..formatting import TaskFormatter

# Create console instance here to avoid circular import
console = Console()


def display_task(task: Task, message: str = "", console_instance: Console = None) -> None:
    """
    Display a single task with optional message.

    Args:
        task: Task object to display
        message: Optional message to show before task (e.g., "✓ Created:")
        console_instance: Optional Rich console instance (defaults to module console)
    """
    if console_instance is None:
        console_instance = console

    if message:
        console_instance.print(f"[green]{message}[/green]")

    console_instance.print(
        f"  [cyan]{task.short_id}[/cyan]: {task.title} "
        f"[dim]({task.category}, {task.status})[/dim]"
    )


def display_view(
    projections: Projections,
    state: ViewState,
    console_instance: Console = None,
    today: Optional[date] = None,
) -> None:
    """
    Render whichever view the state selects.

    The grid and table show the filtered, sorted tasks; the calendar shows
    every task.
    """
    if console_instance is None:
        console_instance = console

    if state.view == VIEW_CALENDAR:
        console_instance.print(TaskFormatter.create_calendar(projections.calendar))
        return

    if state.view == VIEW_TABLE:
        if not projections.visible:
            console_instance.print("[dim]No tasks match the current filters.[/dim]")
            return
        console_instance.print(TaskFormatter.create_table(
            projections.visible,
            title=f"Tasks ({len(projections.visible)})",
            today=today,
        ))
        return

    console_instance.print(TaskFormatter.create_grid(projections.by_category, today))


def display_filters(state: ViewState, console_instance: Console = None) -> None:
    """Print the filters currently applied to the grid/table views."""
    if console_instance is None:
        console_instance = console

    shown = [c for c in CATEGORIES if c in state.active_categories]
    console_instance.print(f"[bold]View:[/bold]       {state.view}")
    console_instance.print(f"[bold]Categories:[/bold] {', '.join(shown) or '[dim]none[/dim]'}")
    console_instance.print(f"[bold]Status:[/bold]     {state.status_filter}")
    console_instance.print(f"[bold]Search:[/bold]     {state.query or '[dim](none)[/dim]'}")
    console_instance.print(f"[bold]Sort:[/bold]       {state.sort_key}")
