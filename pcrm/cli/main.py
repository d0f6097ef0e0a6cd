"""
FILE: pcrm/cli/main.py
PURPOSE: Typer-based CLI for one-shot board commands
EXPORTS:
  - app (Typer application)
  - step_app (Typer sub-application for next steps)
  - main() (entry point)
  - version() - Show version
  - help() - Show command list and usage
  - repl() - Launch interactive REPL
  - add() / edit() / rm() / done() / show() - Task commands
  - step_add() / step_ls() / step_rm() / step_done() - Next step commands
  - ls() / grid() / cal() / stats() - Views
  - export() / import_() - JSON transfer
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - pcrm.core.service (business logic)
  - pcrm.core.exceptions (error handling)
  - pcrm.logging_setup (logging)
  - pcrm.repl (interactive mode)
NOTES:
  - Listing commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Calls service layer directly (no repository access)
"""

import logging
import sys

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console

from ..config import get_settings
from ..logging_setup import setup_logging

# Typer app setup
app = typer.Typer(
    name="pcrm",
    help="Personal CRM: tasks, dated next steps and a calendar in your terminal",
    add_completion=False,
)

# Next step sub-command group
step_app = typer.Typer(
    name="step",
    help="Next step commands",
)
app.add_typer(step_app, name="step")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.1.0"


@app.callback(invoke_without_command=True)
def default_command(ctx: typer.Context):
    """
    Default callback - sets up logging, launches REPL when no command is given.

    If a subcommand is invoked, it runs after logging is configured.
    If no subcommand is invoked (just 'pcrm'), launch the REPL.
    """
    settings = get_settings()
    try:
        setup_logging(
            log_path=settings.log_path,
            console_level=getattr(logging, settings.log_level, logging.WARNING),
        )
    except OSError as e:
        error_console.print(f"[yellow]Warning:[/yellow] File logging disabled: {e}")

    if ctx.invoked_subcommand is None:
        # No command specified, launch REPL
        from ..repl import main as repl_main
        try:
            repl_main()
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {e}")
            raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (
    # System commands
    version,
    help,
    repl,
    # Task commands
    add,
    edit,
    rm,
    done,
    show,
    # Next step commands
    step_add,
    step_ls,
    step_rm,
    step_done,
    # View commands
    ls,
    grid,
    cal,
    stats,
    # Transfer commands
    export,
    import_,
)


def main():
    """Main entry point for CLI."""
    app()


