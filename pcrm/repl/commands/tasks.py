"""
FILE: pcrm/repl/commands/tasks.py
PURPOSE: Task and next step command handlers for REPL
"""

from ..main import console, repl_context
from ..parser import ParseResult, split_refs
from ..display import display_task
from ...core import service
from ...core.constants import DEFAULT_CATEGORY, DEFAULT_STATUS, STATUS_COMPLETED
from ...core.dates import format_date_short
from ...core.exceptions import (
    PcrmError,
    TaskNotFoundError,
    NextStepNotFoundError,
    InvalidInputError,
)
from ...formatting import TaskFormatter


def handle_add_command(result: ParseResult) -> None:
    """
    Handle 'add' command - create new task.

    Args:
        result: Parsed command with args and flags

    Usage:
        add Call Mike
        add "Dinner with parents" --category family --due 2024-06-05
        add "Gym" --status pending --desc "Upper body"
    """
    if not result.args:
        console.print("[red]Error:[/red] Task title required")
        console.print("[dim]Usage: add <title> [--category C] [--status S] [--due YYYY-MM-DD] [--desc TEXT][/dim]")
        return

    # Join all args as the title (in case they didn't use quotes)
    title = result.text

    try:
        category = result.value("category", "cat")
        status = result.value("status")
        task = service.create_task(
            repl_context.get_store(),
            title=title,
            category=service.resolve_category(category) if category else DEFAULT_CATEGORY,
            status=service.resolve_status(status) if status else DEFAULT_STATUS,
            due_date=result.value("due"),
            description=result.value("desc", "description"),
        )
        console.print(f"[green]✓ Created task [bold]{task.short_id}[/bold] in [magenta]{task.category}[/magenta]:[/green] {task.title}")
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
    except PcrmError as e:
        console.print(f"[red]Unexpected error:[/red] {e}")


def handle_edit_command(result: ParseResult) -> None:
    """
    Handle 'edit' command - change task fields.

    Args:
        result: Parsed command with args and flags

    Usage:
        edit <id> New title words
        edit <id> --status pending --due 2024-06-10
        edit <id> --no-due
        edit <id> --category family --desc "Ask about Sunday"
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: edit <id> [<new title>] [--title T] [--category C] [--status S] [--due D] [--no-due] [--desc TEXT][/dim]")
        return

    ref = result.args[0]
    changes = {}

    try:
        title = result.value("title")
        if title is None and len(result.args) > 1:
            title = " ".join(result.args[1:])
        if title is not None:
            changes["title"] = title

        category = result.value("category", "cat")
        if category is not None:
            changes["category"] = service.resolve_category(category)

        status = result.value("status")
        if status is not None:
            changes["status"] = service.resolve_status(status)

        if result.flags.get("no-due"):
            changes["due_date"] = None
        elif result.value("due") is not None:
            changes["due_date"] = result.value("due")

        description = result.value("desc", "description")
        if description is not None:
            changes["description"] = description

        if not changes:
            console.print("[yellow]Nothing to change.[/yellow] [dim]Pass a new title or a --flag[/dim]")
            return

        task = service.update_task(repl_context.get_store(), ref, **changes)
        display_task(task, "✓ Updated:", console)
    except (TaskNotFoundError, InvalidInputError) as e:
        console.print(f"[red]Error:[/red] {e}")
    except PcrmError as e:
        console.print(f"[red]Unexpected error:[/red] {e}")


def handle_rm_command(result: ParseResult) -> None:
    """
    Handle 'rm' command - delete task(s).

    Usage:
        rm <id>
        rm <id>,<id>,<id>
    """
    refs = split_refs(result.args)
    if not refs:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: rm <id>[,<id>...][/dim]")
        return

    store = repl_context.get_store()
    for ref in refs:
        try:
            task = service.delete_task(store, ref)
            console.print(f"[red]✗ Deleted:[/red] {task.title} [dim]({task.short_id})[/dim]")
        except (TaskNotFoundError, InvalidInputError) as e:
            console.print(f"[red]Error:[/red] {e}")


def handle_done_command(result: ParseResult) -> None:
    """
    Handle 'done' command - toggle Completed/Active.

    Usage:
        done <id>
        done <id>,<id>
    """
    refs = split_refs(result.args)
    if not refs:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: done <id>[,<id>...][/dim]")
        return

    store = repl_context.get_store()
    for ref in refs:
        try:
            task = service.toggle_complete(store, ref)
            if task.status == STATUS_COMPLETED:
                display_task(task, "✓ Completed:", console)
            else:
                display_task(task, "↺ Reopened:", console)
        except (TaskNotFoundError, InvalidInputError) as e:
            console.print(f"[red]Error:[/red] {e}")


def handle_show_command(result: ParseResult) -> None:
    """
    Handle 'show' command - full details of one task.

    Usage:
        show <id>
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: show <id>[/dim]")
        return

    try:
        task = service.find_task(repl_context.get_store(), result.args[0])
        console.print(TaskFormatter.task_detail(task))
    except (TaskNotFoundError, InvalidInputError) as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_step_command(result: ParseResult) -> None:
    """
    Handle 'step' command - manage a task's next steps.

    Usage:
        step add <id> <text> [--due YYYY-MM-DD]
        step ls <id>
        step rm <id> <step#>
        step done <id> <step#>
    """
    usage = "[dim]Usage: step add|ls|rm|done <id> ...[/dim]"
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Step subcommand and task ID required")
        console.print(usage)
        return

    subcommand, ref, rest = result.args[0].lower(), result.args[1], result.args[2:]
    store = repl_context.get_store()

    try:
        if subcommand == "add":
            if not rest:
                console.print("[red]Error:[/red] Step text required")
                return
            task = service.add_next_step(store, ref, " ".join(rest), result.value("due"))
            step = task.next_steps[-1]
            console.print(f"[green]✓ Added step {len(task.next_steps)}:[/green] {step.text}")

        elif subcommand == "ls":
            task = service.find_task(store, ref)
            if not task.next_steps:
                console.print(f"[dim]No next steps for {task.title}[/dim]")
            for index, step in enumerate(task.next_steps, start=1):
                marker = "[green]✓[/green]" if step.done else "○"
                due = format_date_short(step.due_date) if step.due_date else "No date"
                console.print(f"  {index}. {marker} {step.text} [dim]({due})[/dim]")

        elif subcommand in ("rm", "done"):
            if not rest:
                console.print("[red]Error:[/red] Step number or ID required")
                return
            step = service.find_next_step(service.find_task(store, ref), rest[0])
            if subcommand == "rm":
                service.remove_next_step(store, ref, step.id)
                console.print(f"[red]✗ Removed step:[/red] {step.text}")
            else:
                service.toggle_next_step_done(store, ref, step.id)
                label = "↺ Step reopened:" if step.done else "✓ Step done:"
                console.print(f"[green]{label}[/green] {step.text}")

        else:
            console.print(f"[red]Error:[/red] Unknown step subcommand '{subcommand}'")
            console.print(usage)

    except (TaskNotFoundError, NextStepNotFoundError, InvalidInputError) as e:
        console.print(f"[red]Error:[/red] {e}")
