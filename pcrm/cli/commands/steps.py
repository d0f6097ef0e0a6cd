"""
FILE: pcrm/cli/commands/steps.py
PURPOSE: Next step commands (step add, step ls, step rm, step done)
NOTES:
  - Steps are addressed by their 1-based position, id, or id prefix
"""

import json
from typing import Optional

import typer
from rich.table import Table

from ..main import step_app, console, error_console
from ...core import service
from ...core.dates import format_date_short
from ...core.exceptions import (
    PcrmError,
    TaskNotFoundError,
    NextStepNotFoundError,
    InvalidInputError,
)


@step_app.command("add")
def step_add(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    text: str = typer.Argument(..., help="What needs to happen next"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Add a next step to a task.

    Example:
        pcrm step add 3f2a "Send trade-in numbers" --due 2024-06-02
    """
    try:
        store = service.open_store()
        task = service.add_next_step(store, task_id, text, due)
        step = task.next_steps[-1]

        if json_output:
            typer.echo(json.dumps(step.to_dict(), ensure_ascii=False))
        elif raw:
            typer.echo(f"{step.id}: {step.text}")
        else:
            console.print(
                f"[green]✓ Added step {len(task.next_steps)} to [bold]{task.short_id}[/bold]:[/green] {step.text}"
            )

    except (TaskNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@step_app.command("ls")
def step_ls(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List a task's next steps in order.

    Example:
        pcrm step ls 3f2a
    """
    try:
        store = service.open_store()
        task = service.find_task(store, task_id)

        if json_output:
            typer.echo(json.dumps([s.to_dict() for s in task.next_steps], indent=2, ensure_ascii=False))
            return

        if raw:
            for index, step in enumerate(task.next_steps, start=1):
                marker = "x" if step.done else " "
                typer.echo(f"{index} [{marker}] {step.text} | due {step.due_date or '-'}")
            return

        if not task.next_steps:
            console.print(f"[dim]No next steps for {task.title}[/dim]")
            return

        table = Table(title=f"Next steps: {task.title}", show_header=True, header_style="bold cyan")
        table.add_column("#", style="cyan", width=3)
        table.add_column("Done", width=4)
        table.add_column("Step", style="white")
        table.add_column("Due", no_wrap=True)
        for index, step in enumerate(task.next_steps, start=1):
            table.add_row(
                str(index),
                "✓" if step.done else "○",
                step.text,
                format_date_short(step.due_date),
            )
        console.print(table)

    except (TaskNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@step_app.command("rm")
def step_rm(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    step_ref: str = typer.Argument(..., help="Step number, ID, or ID prefix"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Remove a next step from a task.

    Example:
        pcrm step rm 3f2a 2
    """
    try:
        store = service.open_store()
        step = service.find_next_step(service.find_task(store, task_id), step_ref)
        task = service.remove_next_step(store, task_id, step.id)

        if raw:
            typer.echo(f"Deleted: {step.id}")
        else:
            console.print(f"[red]✗ Removed step from [bold]{task.short_id}[/bold]:[/red] {step.text}")

    except (TaskNotFoundError, NextStepNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@step_app.command("done")
def step_done(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    step_ref: str = typer.Argument(..., help="Step number, ID, or ID prefix"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Toggle a next step's done flag.

    Example:
        pcrm step done 3f2a 1
    """
    try:
        store = service.open_store()
        step = service.find_next_step(service.find_task(store, task_id), step_ref)
        task = service.toggle_next_step_done(store, task_id, step.id)
        step = service.find_next_step(task, step.id)

        if raw:
            typer.echo(f"{step.id}: {'done' if step.done else 'open'}")
        elif step.done:
            console.print(f"[green]✓ Step done:[/green] {step.text}")
        else:
            console.print(f"[blue]↺ Step reopened:[/blue] {step.text}")

    except (TaskNotFoundError, NextStepNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
