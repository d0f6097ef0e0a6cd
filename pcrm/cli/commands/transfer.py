"""
FILE: pcrm/cli/commands/transfer.py
PURPOSE: JSON backup commands (export, import)
"""

from typing import Optional

import typer

from ..main import app, console, error_console
from ...core import service
from ...core.exceptions import ParseFailure, PcrmError


@app.command()
def export(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Target file or directory (default: current directory)"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Export every task to a dated JSON file.

    Example:
        pcrm export
        pcrm export --output ~/backups
    """
    try:
        store = service.open_store()
        path = service.export_tasks(store, output)
        if raw:
            typer.echo(str(path))
        else:
            console.print(f"[green]✓ Exported {len(store)} task(s) to[/green] {path}")

    except OSError as e:
        error_console.print(f"[red]Error:[/red] Could not write export: {e}")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command("import")
def import_(
    path: str = typer.Argument(..., help="JSON file to import"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Replace all tasks with the contents of a JSON export.

    If the file is not a JSON array of tasks, nothing changes.

    Example:
        pcrm import personal-crm-tasks-2024-06-01.json
    """
    try:
        store = service.open_store()
        count = service.import_tasks(store, path)
        if raw:
            typer.echo(f"Imported: {count}")
        else:
            console.print(f"[green]✓ Imported {count} task(s) from[/green] {path}")

    except ParseFailure as e:
        error_console.print(f"[yellow]Warning:[/yellow] {e}. Tasks left unchanged.")
        raise typer.Exit(1)
    except PcrmError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
