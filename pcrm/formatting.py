"""
FILE: pcrm/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - TaskFormatter: Class for rendering tasks, views, metrics and calendars
DEPENDENCIES:
  - rich (tables, panels, columns)
  - json (for JSON serialization)
  - typing (type hints)
  - pcrm.core.models (Task)
  - pcrm.core.views (projections)
NOTES:
  - Centralized formatting logic for consistency
  - Used by both CLI and REPL
  - Renderers take already-computed projections; no filtering happens here
"""

import json
from datetime import date
from typing import Dict, List, Optional

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.constants import (
    CATEGORIES,
    STATUS_ACTIVE,
    STATUS_PENDING,
    STATUS_COMPLETED,
    CALENDAR_MONTH,
    CALENDAR_WEEK,
    WEEKDAY_NAMES,
    EMPTY_LABEL,
)
from .core.dates import (
    format_date_short,
    format_day_heading,
    format_month_title,
    is_due_within_days,
    is_overdue,
)
from .core.models import Task
from .core.views import CalendarDay, CalendarView, Metrics, nearest_next_step

STATUS_STYLES = {
    STATUS_ACTIVE: "blue",
    STATUS_PENDING: "yellow",
    STATUS_COMPLETED: "green",
}


class TaskFormatter:
    """Centralized task display formatting."""

    # --- Small pieces ---

    @staticmethod
    def status_markup(status: str) -> str:
        style = STATUS_STYLES.get(status, "white")
        return f"[{style}]{status}[/{style}]"

    @staticmethod
    def due_markup(due_date: Optional[str], today: Optional[date] = None) -> str:
        """Due date colored red when overdue, yellow when due soon."""
        label = format_date_short(due_date)
        if is_overdue(due_date, today):
            return f"[red]{label}[/red]"
        if is_due_within_days(due_date, today=today):
            return f"[yellow]{label}[/yellow]"
        return label

    # --- Table view ---

    @staticmethod
    def create_table(
        tasks: List[Task],
        title: str = "Tasks",
        today: Optional[date] = None,
    ) -> Table:
        """
        Create Rich table for the flat table view.

        Args:
            tasks: Filtered and sorted tasks
            title: Table title
            today: Reference date for due highlighting

        Returns:
            Rich Table object ready for display
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=8, no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Category", style="magenta")
        table.add_column("Status")
        table.add_column("Due", no_wrap=True)
        table.add_column("Next Step", max_width=40)
        table.add_column("Next Step Due", no_wrap=True)

        for task in tasks:
            step = nearest_next_step(task)
            table.add_row(
                task.short_id,
                task.title,
                task.category,
                TaskFormatter.status_markup(task.status),
                TaskFormatter.due_markup(task.due_date, today),
                step.text if step else EMPTY_LABEL,
                format_date_short(step.due_date if step else None),
            )

        return table

    # --- Grid view ---

    @staticmethod
    def task_card(task: Task, today: Optional[date] = None) -> Text:
        """Render one task as a small card for the grid view."""
        card = Text()
        card.append(f"{task.title}\n", style="bold")
        if task.description:
            card.append(f"{task.description}\n", style="dim")
        card.append_text(Text.from_markup(
            f"[cyan]{task.short_id}[/cyan] "
            f"{TaskFormatter.status_markup(task.status)}"
        ))
        if task.due_date:
            card.append_text(Text.from_markup(
                f" due {TaskFormatter.due_markup(task.due_date, today)}"
            ))
        step = nearest_next_step(task)
        if step:
            card.append("\nNext: ", style="dim")
            card.append(step.text)
            if step.due_date:
                card.append(f" · {format_date_short(step.due_date)}", style="dim")
        return card

    @staticmethod
    def create_grid(
        by_category: Dict[str, List[Task]],
        today: Optional[date] = None,
    ) -> Columns:
        """
        Create one panel per category, cards stacked inside.

        Args:
            by_category: Grouped tasks (all five categories present)
            today: Reference date for due highlighting
        """
        panels = []
        for category in CATEGORIES:
            tasks = by_category.get(category, [])
            if tasks:
                cards = []
                for task in tasks:
                    cards.append(TaskFormatter.task_card(task, today))
                    cards.append(Text(""))
                body = Group(*cards[:-1])
            else:
                body = Text("No tasks in this category.", style="dim")
            panels.append(Panel(
                body,
                title=f"[bold]{category}[/bold]",
                subtitle=f"{len(tasks)} tasks",
                width=36,
            ))
        return Columns(panels)

    # --- Metrics ---

    @staticmethod
    def create_metrics(metrics: Metrics, due_soon_days: int = 3) -> Table:
        """Create the metrics strip (totals plus per-category counts)."""
        table = Table(show_header=True, header_style="bold cyan", title="Overview")
        table.add_column("Total Tasks", justify="center")
        table.add_column("Active", justify="center")
        table.add_column(f"Due ≤ {due_soon_days} Days", justify="center")
        table.add_column("Overdue", justify="center", style="red")
        for category in CATEGORIES:
            table.add_column(category, justify="center", style="magenta")

        table.add_row(
            str(metrics.total),
            str(metrics.active),
            str(metrics.due_soon),
            str(metrics.overdue),
            *[str(metrics.counts.get(c, 0)) for c in CATEGORIES],
        )
        return table

    # --- Calendar ---

    @staticmethod
    def _day_cell(cell: CalendarDay) -> Text:
        text = Text()
        text.append(str(cell.day.day), style="bold" if cell.in_month else "dim")
        if cell.is_today:
            text.append(" Today", style="bold white on blue")
        for task in cell.shown:
            text.append("\n")
            text.append(task.title, style="bold")
            text.append(f" · {task.category}", style="dim")
        if cell.overflow:
            text.append(f"\n+{cell.overflow} more…", style="dim")
        return text

    @staticmethod
    def create_month_calendar(calendar: CalendarView) -> Table:
        """Create a 7-column month grid (Sunday first)."""
        table = Table(
            title=format_month_title(calendar.cursor),
            show_header=True,
            header_style="bold cyan",
            show_lines=True,
            expand=True,
        )
        for name in WEEKDAY_NAMES:
            table.add_column(name, ratio=1, vertical="top")

        days = list(calendar.days)
        for start in range(0, len(days), 7):
            table.add_row(*[TaskFormatter._day_cell(cell) for cell in days[start:start + 7]])
        return table

    @staticmethod
    def _day_list(cell: CalendarDay, with_year: bool = False, empty: str = "No tasks") -> Panel:
        lines = []
        for task in cell.tasks:
            line = Text()
            line.append(f"[{task.category}] ", style="magenta")
            line.append(task.title, style="bold")
            line.append_text(Text.from_markup(f" ({TaskFormatter.status_markup(task.status)})"))
            if task.due_date:
                line.append(f"  due {format_date_short(task.due_date)}", style="dim")
            lines.append(line)
        body = Group(*lines) if lines else Text(empty, style="dim")
        title = format_day_heading(cell.day, with_year=with_year)
        if cell.is_today:
            title += " [white on blue] Today [/white on blue]"
        return Panel(body, title=title, title_align="left")

    @staticmethod
    def create_calendar(calendar: CalendarView):
        """Render the calendar in its own mode (month grid, week list, day list)."""
        if calendar.mode == CALENDAR_MONTH:
            return TaskFormatter.create_month_calendar(calendar)
        if calendar.mode == CALENDAR_WEEK:
            return Group(*[TaskFormatter._day_list(cell) for cell in calendar.days])
        return TaskFormatter._day_list(
            calendar.days[0], with_year=True, empty="No tasks for this date."
        )

    # --- Details ---

    @staticmethod
    def task_detail(task: Task, today: Optional[date] = None) -> Panel:
        """Full task details, next steps numbered in list order."""
        lines = [
            f"[bold]ID:[/bold]          [cyan]{task.id}[/cyan]",
            f"[bold]Category:[/bold]    [magenta]{task.category}[/magenta]",
            f"[bold]Status:[/bold]      {TaskFormatter.status_markup(task.status)}",
            f"[bold]Due:[/bold]         {TaskFormatter.due_markup(task.due_date, today)}",
            f"[bold]Created:[/bold]     {task.created_at or EMPTY_LABEL}",
        ]
        if task.description:
            lines.append("")
            lines.append(task.description)
        lines.append("")
        lines.append("[bold]Next steps:[/bold]")
        if not task.next_steps:
            lines.append("  [dim]No next steps yet.[/dim]")
        for index, step in enumerate(task.next_steps, start=1):
            marker = "✓" if step.done else "○"
            due = f"Due {format_date_short(step.due_date)}" if step.due_date else "No date"
            lines.append(
                f"  {index}. {marker} {step.text} [dim]({due}, {step.id[:8]})[/dim]"
            )
        return Panel("\n".join(lines), title=f"[bold]{task.title}[/bold]", title_align="left")

    # --- Machine-readable ---

    @staticmethod
    def to_json_array(tasks: List[Task]) -> str:
        """Convert task list to a pretty JSON array string."""
        return json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False)

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        """
        Convert task list to plain text lines.

        Format: "<id> [x] <category> | <title> | due <date>"
        """
        lines = []
        for task in tasks:
            status_marker = "x" if task.status == STATUS_COMPLETED else " "
            lines.append(
                f"{task.id} [{status_marker}] {task.category} | {task.title}"
                f" | due {task.due_date or '-'}"
            )
        return lines
