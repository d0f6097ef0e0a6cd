"""
FILE: pcrm/cli/commands/system.py
PURPOSE: System commands (version, help, repl)
"""

import typer

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console, error_console, __version__


@app.command()
def version():
    """Show pcrm version."""
    console.print(f"pcrm v{__version__}")


@app.command()
def help():
    """Show available commands and usage."""
    console.print("\n[bold cyan]pcrm[/bold cyan] - Personal CRM task board for the terminal\n")
    console.print(f"[dim]Version {__version__}[/dim]\n")

    console.print("[bold]Usage:[/bold]")
    console.print("  pcrm \\[command] \\[options]")
    console.print("  pcrm                      [dim]# Launch interactive REPL (default)[/dim]\n")

    console.print("[bold]Commands:[/bold]")

    commands = [
        ("add", "Create a new task", 'pcrm add "Title" [-c CATEGORY] [-s STATUS] [-d DATE]'),
        ("edit", "Edit task fields", "pcrm edit <task_id> [--title] [--category] [--status] [--due]"),
        ("rm", "Delete task(s)", "pcrm rm <task_id> [<task_id> ...]"),
        ("done", "Toggle Completed/Active", "pcrm done <task_id> [<task_id> ...]"),
        ("show", "View full task details", "pcrm show <task_id>"),
        ("step add", "Add a next step", 'pcrm step add <task_id> "Text" [--due DATE]'),
        ("step ls", "List next steps", "pcrm step ls <task_id>"),
        ("step rm", "Remove a next step", "pcrm step rm <task_id> <step#>"),
        ("step done", "Toggle a next step", "pcrm step done <task_id> <step#>"),
        ("ls", "Table view", "pcrm ls [-c CATEGORY]... [-s STATUS] [-q TEXT] [--sort KEY]"),
        ("grid", "Grid view by category", "pcrm grid (same filters as ls)"),
        ("cal", "Calendar view", "pcrm cal [--mode month|week|day] [--date DATE] [--prev|--next]"),
        ("stats", "Summary metrics", "pcrm stats"),
        ("export", "Export tasks to JSON", "pcrm export [--output PATH]"),
        ("import", "Replace tasks from JSON", "pcrm import <file>"),
        ("repl", "Launch interactive REPL", "pcrm repl"),
        ("version", "Show version", "pcrm version"),
        ("help", "Show this help message", "pcrm help"),
    ]

    for cmd, desc, example in commands:
        console.print(f"  [green]{cmd:10}[/green] {desc}")
        console.print(f"             [dim]{example}[/dim]\n")

    console.print("[bold]Global Options:[/bold]")
    console.print("  [yellow]--json[/yellow]    Output as JSON (for scripting)")
    console.print("  [yellow]--raw[/yellow]     Plain text output (no colors)")
    console.print("  [yellow]--help[/yellow]    Show detailed help for a command\n")

    console.print("[bold]Examples:[/bold]")
    console.print("  pcrm                           # Launch REPL (default)")
    console.print('  pcrm add "Call Mike" -c dealership -d 2024-06-02')
    console.print("  pcrm ls --status pending --sort createdAt")
    console.print("  pcrm ls -c family -c personal  # Only these categories")
    console.print('  pcrm ls --search "trade-in"')
    console.print("  pcrm done 3f2a                 # Ids accept unique prefixes")
    console.print("  pcrm cal --mode week")
    console.print("  pcrm export --output ~/backups\n")


@app.command()
def repl():
    """
    Launch interactive REPL mode.

    The REPL provides:
    - Command history (up/down arrows)
    - Autocomplete (Tab key)
    - Filters, sort and calendar that persist between commands
    - Exit with Ctrl+D or type 'exit'

    Example:
        pcrm repl
    """
    # Import here to avoid loading REPL dependencies for one-shot commands
    from ...repl import main as repl_main

    try:
        repl_main()
    except Exception as e:
        error_console.print(f"[red]Error starting REPL:[/red] {e}")
        raise typer.Exit(1)
