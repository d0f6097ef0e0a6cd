"""
FILE: pcrm/repl/commands/transfer.py
PURPOSE: Export/import command handlers for REPL
"""

from ..main import console, repl_context
from ..parser import ParseResult
from ...core import service
from ...core.exceptions import ParseFailure


def handle_export_command(result: ParseResult) -> None:
    """
    Handle 'export' command - write all tasks to a dated JSON file.

    Usage:
        export                  # ./personal-crm-tasks-YYYY-MM-DD.json
        export ~/backups        # into a directory
        export tasks.json       # to a specific file
    """
    destination = result.args[0] if result.args else None
    store = repl_context.get_store()
    try:
        path = service.export_tasks(store, destination)
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not write export: {e}")
        return
    console.print(f"[green]✓ Exported {len(store)} task(s) to[/green] {path}")


def handle_import_command(result: ParseResult) -> None:
    """
    Handle 'import' command - replace all tasks with a JSON export.

    Usage:
        import personal-crm-tasks-2024-06-01.json
    """
    if not result.args:
        console.print("[red]Error:[/red] File path required")
        console.print("[dim]Usage: import <file>[/dim]")
        return

    try:
        count = service.import_tasks(repl_context.get_store(), result.args[0])
    except ParseFailure as e:
        console.print(f"[yellow]Warning:[/yellow] {e}. Tasks left unchanged.")
        return
    console.print(f"[green]✓ Imported {count} task(s)[/green]")
