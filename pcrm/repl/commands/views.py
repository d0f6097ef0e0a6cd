"""
FILE: pcrm/repl/commands/views.py
PURPOSE: View-state command handlers for REPL (ls, view, cat, status, sort, search, cal, stats)
NOTES:
  - Each handler replaces repl_context.state with a new ViewState
  - Filter changes re-render the active view so the effect is visible
"""

from datetime import date

from ..main import console, repl_context
from ..parser import ParseResult
from ..display import display_filters, display_view
from ...core import service
from ...core.constants import CATEGORIES, STATUS_ALL, VIEW_CALENDAR
from ...core.exceptions import InvalidInputError
from ...formatting import TaskFormatter


def _render() -> None:
    display_view(repl_context.projections(), repl_context.state, console)


def handle_ls_command(result: ParseResult) -> None:
    """
    Handle 'ls' command - render the active view with the active filters.

    Usage:
        ls
        ls --filters      (also print the active filters)
    """
    if result.flags.get("filters"):
        display_filters(repl_context.state, console)
        console.print()
    _render()


def handle_view_command(result: ParseResult) -> None:
    """
    Handle 'view' command - switch between grid, table and calendar.

    Usage:
        view              # Show the current view
        view table
        view cal
    """
    if not result.args:
        console.print(f"Current view: [cyan]{repl_context.state.view}[/cyan]")
        return

    try:
        repl_context.state = repl_context.state.with_view(service.resolve_view(result.args[0]))
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        return
    _render()


def handle_cat_command(result: ParseResult) -> None:
    """
    Handle 'cat' command - toggle category filters.

    Usage:
        cat                  # Show active filters
        cat family           # Hide Family if shown, show it if hidden
        cat family business  # Toggle several
        cat all              # Show every category
        cat none             # Hide every category
    """
    if not result.args:
        display_filters(repl_context.state, console)
        return

    state = repl_context.state
    try:
        for name in result.args:
            if name.lower() == "all":
                state = state.with_categories(CATEGORIES)
            elif name.lower() == "none":
                state = state.with_categories(())
            else:
                state = state.toggle_category(service.resolve_category(name))
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    repl_context.state = state
    shown = [c for c in CATEGORIES if c in state.active_categories]
    console.print(f"✓ Showing: [magenta]{', '.join(shown) or 'no categories'}[/magenta]")
    _render()


def handle_status_command(result: ParseResult) -> None:
    """
    Handle 'status' command - set the status filter.

    Usage:
        status              # Show current status filter
        status pending
        status all          # Clear status filter
    """
    if not result.args:
        console.print(f"Current status filter: [cyan]{repl_context.state.status_filter}[/cyan]")
        return

    try:
        status = service.resolve_status(result.args[0], allow_all=True)
        repl_context.state = repl_context.state.with_status(status)
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    if status == STATUS_ALL:
        console.print("✓ Cleared status filter")
    else:
        console.print(f"✓ Filtering to [cyan]{status}[/cyan] tasks")
    _render()


def handle_sort_command(result: ParseResult) -> None:
    """
    Handle 'sort' command - set the sort key.

    Usage:
        sort                # Show current sort key
        sort due           # dueDate: soonest first, undated last
        sort created       # createdAt: newest first
        sort category      # alphabetical by category
    """
    if not result.args:
        console.print(f"Current sort: [cyan]{repl_context.state.sort_key}[/cyan]")
        return

    try:
        sort_key = service.resolve_sort_key(result.args[0])
        repl_context.state = repl_context.state.with_sort(sort_key)
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    console.print(f"✓ Sorting by [cyan]{sort_key}[/cyan]")
    _render()


def handle_search_command(result: ParseResult) -> None:
    """
    Handle 'search' command - set the free-text query.

    Usage:
        search trade-in     # Match title, description or any next step
        search              # Clear the search
    """
    query = result.text
    repl_context.state = repl_context.state.with_query(query)
    if query.strip():
        console.print(f'✓ Searching for [cyan]"{query.strip()}"[/cyan]')
    else:
        console.print("✓ Cleared search")
    _render()


def handle_cal_command(result: ParseResult) -> None:
    """
    Handle 'cal' command - show and navigate the calendar.

    Usage:
        cal                 # Switch to the calendar view
        cal week            # Month, week or day mode
        cal next / cal prev # Move one month
        cal today           # Back to today
        cal 2024-06-05      # Jump to a date
        cal day 2024-06-05  # Combine actions
    """
    state = repl_context.state
    try:
        for arg in result.args:
            action = arg.lower()
            if action == "prev":
                state = state.calendar_prev_month()
            elif action == "next":
                state = state.calendar_next_month()
            elif action == "today":
                state = state.calendar_today()
            elif action[:1].isdigit():
                state = state.with_cursor(date.fromisoformat(service.parse_due_date(arg)))
            else:
                state = state.with_calendar_mode(service.resolve_calendar_mode(action))
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    repl_context.state = state.with_view(VIEW_CALENDAR)
    _render()


def handle_stats_command(result: ParseResult) -> None:
    """
    Handle 'stats' command - board-wide metrics.

    Usage:
        stats
    """
    metrics = repl_context.projections().metrics
    console.print(TaskFormatter.create_metrics(metrics, repl_context.engine.due_soon_days))
