"""
FILE: pcrm/cli/commands/tasks.py
PURPOSE: Task commands (add, edit, rm, done, show)
"""

from typing import List, Optional

import typer

from ..main import app, console, error_console
from ...core import service
from ...core.constants import DEFAULT_CATEGORY, DEFAULT_STATUS, STATUS_COMPLETED
from ...core.exceptions import (
    PcrmError,
    TaskNotFoundError,
    InvalidInputError,
)
from ...formatting import TaskFormatter


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    category: str = typer.Option(DEFAULT_CATEGORY, "--category", "-c", help="Category (default: Dealership)"),
    status: str = typer.Option(DEFAULT_STATUS, "--status", "-s", help="Status (default: Active)"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
    description: Optional[str] = typer.Option(None, "--description", "--desc", help="Longer description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        pcrm add "Call Mike re: trade-in"
        pcrm add "Dinner with parents" --category family --due 2024-06-05
    """
    try:
        store = service.open_store()
        task = service.create_task(
            store,
            title=title,
            category=service.resolve_category(category),
            status=service.resolve_status(status),
            due_date=due,
            description=description,
        )

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"{task.id}: {task.title}")
        else:
            console.print(f"[green]✓ Created task [bold]{task.short_id}[/bold]:[/green] {task.title}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def edit(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="New category"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="New status"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="New due date (YYYY-MM-DD, empty to clear)"),
    no_due: bool = typer.Option(False, "--no-due", help="Remove the due date"),
    description: Optional[str] = typer.Option(None, "--description", "--desc", help="New description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Edit a task's fields. Only the given options change.

    Example:
        pcrm edit 3f2a --title "Call Mike (again)"
        pcrm edit 3f2a --status pending --due 2024-06-10
        pcrm edit 3f2a --no-due
    """
    try:
        store = service.open_store()
        changes = {}
        if title is not None:
            changes["title"] = title
        if category is not None:
            changes["category"] = service.resolve_category(category)
        if status is not None:
            changes["status"] = service.resolve_status(status)
        if no_due:
            changes["due_date"] = None
        elif due is not None:
            changes["due_date"] = due
        if description is not None:
            changes["description"] = description

        if not changes:
            error_console.print("[red]Error:[/red] Nothing to change. Pass at least one option (see --help)")
            raise typer.Exit(1)

        task = service.update_task(store, task_id, **changes)

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"{task.id}: {task.title}")
        else:
            console.print(f"[green]✓ Updated task [bold]{task.short_id}[/bold]:[/green] {task.title}")

    except (TaskNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def rm(
    task_ids: List[str] = typer.Argument(..., help="Task ID(s) to delete"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Delete one or more tasks (and their next steps).

    Example:
        pcrm rm 3f2a
        pcrm rm 3f2a 9bc1
    """
    store = service.open_store()
    failed = False
    for task_id in task_ids:
        try:
            task = service.delete_task(store, task_id)
            if raw:
                typer.echo(f"Deleted: {task.id}")
            else:
                console.print(f"[red]✗ Deleted task [bold]{task.short_id}[/bold]:[/red] {task.title}")
        except (TaskNotFoundError, InvalidInputError) as e:
            error_console.print(f"[red]Error:[/red] {e}")
            failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def done(
    task_ids: List[str] = typer.Argument(..., help="Task ID(s) to toggle"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Toggle tasks between Completed and Active.

    Example:
        pcrm done 3f2a
        pcrm done 3f2a 9bc1
    """
    store = service.open_store()
    failed = False
    for task_id in task_ids:
        try:
            task = service.toggle_complete(store, task_id)
            if json_output:
                typer.echo(task.to_json())
            elif raw:
                typer.echo(f"{task.id}: {task.status}")
            elif task.status == STATUS_COMPLETED:
                console.print(f"[green]✓ Completed [bold]{task.short_id}[/bold]:[/green] {task.title}")
            else:
                console.print(f"[blue]↺ Reopened [bold]{task.short_id}[/bold]:[/blue] {task.title}")
        except (TaskNotFoundError, InvalidInputError) as e:
            error_console.print(f"[red]Error:[/red] {e}")
            failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def show(
    task_id: str = typer.Argument(..., help="Task ID to view"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show full details for a task including its next steps.

    Example:
        pcrm show 3f2a
    """
    try:
        store = service.open_store()
        task = service.find_task(store, task_id)

        if json_output:
            typer.echo(task.to_json())
            return

        if raw:
            typer.echo(f"Task {task.id}")
            typer.echo(f"Title: {task.title}")
            if task.description:
                typer.echo(f"Description: {task.description}")
            typer.echo(f"Category: {task.category}")
            typer.echo(f"Status: {task.status}")
            typer.echo(f"Due: {task.due_date or '-'}")
            typer.echo(f"Created: {task.created_at}")
            for index, step in enumerate(task.next_steps, start=1):
                marker = "x" if step.done else " "
                typer.echo(f"Step {index}: [{marker}] {step.text} | due {step.due_date or '-'}")
            return

        console.print(TaskFormatter.task_detail(task))

    except (TaskNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
