"""
FILE: pcrm/repl/main.py
PURPOSE: Interactive REPL for the task board with prompt-toolkit
EXPORTS:
  - REPLContext (session state: store + view state)
  - repl_context (the session's context)
  - execute_command(result) -> bool
  - run_repl() - Main REPL loop
  - main() - Entry point for REPL mode
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - pcrm.core.service (business logic)
  - pcrm.core.views (ViewState, ViewEngine)
  - pcrm.repl.parser (command parsing)
  - pcrm.repl.completer (autocomplete)
NOTES:
  - The store is opened on first use and kept for the whole session
  - View state is immutable; every filter/sort/view command swaps in a new one
  - Bottom toolbar shows board metrics; right prompt shows visible count
  - Ctrl+D or "exit"/"quit" to exit
  - Calls service layer directly (not CLI layer)
"""

import logging
import sys
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.formatted_text import HTML
from rich.console import Console

from ..config import get_settings
from ..core import service
from ..core.constants import CATEGORIES, STATUS_ALL
from ..core.exceptions import PcrmError
from ..core.store import TaskStore
from ..core.views import Projections, ViewEngine, ViewState
from .parser import parse_command, ParseResult
from .completer import create_completer

logger = logging.getLogger(__name__)

# Rich console for formatted output
console = Console()


# --- REPL Context (Persistent State) ---


def _default_engine() -> ViewEngine:
    return ViewEngine(get_settings().due_soon_days)


@dataclass
class REPLContext:
    """
    Persistent context for the REPL session.

    Attributes:
        store: The session's task store (opened lazily on first use)
        state: Current view state (filters, sort, view, calendar cursor)
        engine: Memoizing view engine
    """
    store: Optional[TaskStore] = None
    state: ViewState = field(default_factory=ViewState)
    engine: ViewEngine = field(default_factory=_default_engine)

    def get_store(self) -> TaskStore:
        if self.store is None:
            self.store = service.open_store()
        return self.store

    def projections(self, today: Optional[date] = None) -> Projections:
        """Project the current snapshot through the current view state."""
        return self.engine.project(self.get_store().tasks, self.state, today)

    def get_prompt(self) -> str:
        """
        Generate prompt string based on active filters.

        Returns:
            Prompt like "pcrm> " or "pcrm:[Family,Personal | Pending]> "
        """
        parts = []

        if set(self.state.active_categories) != set(CATEGORIES):
            shown = [c for c in CATEGORIES if c in self.state.active_categories]
            parts.append(",".join(shown) or "no categories")

        if self.state.status_filter != STATUS_ALL:
            parts.append(self.state.status_filter)

        if self.state.query.strip():
            parts.append(f'"{self.state.query.strip()}"')

        if parts:
            context_str = " | ".join(parts)
            return f"pcrm:[{context_str}]> "

        return "pcrm> "


# Global REPL context (persists during session, resets on restart)
repl_context = REPLContext()


def format_prompt() -> HTML:
    """HTML version of REPLContext.get_prompt() with the filters in cyan."""
    prompt = repl_context.get_prompt()
    if prompt == "pcrm> ":
        return HTML("<b>pcrm&gt; </b>")
    inner = prompt[len("pcrm:["):-len("]> ")]
    inner = inner.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return HTML(f"<b>pcrm:[<cyan>{inner}</cyan>]&gt; </b>")


def get_bottom_toolbar() -> HTML:
    """Bottom toolbar with board-wide metrics and the active view."""
    try:
        metrics = repl_context.projections().metrics
    except PcrmError:
        return HTML("<style bg='#444444' fg='#ffffff'> pcrm </style>")

    days = repl_context.engine.due_soon_days
    toolbar_text = (
        f"{metrics.total} tasks | {metrics.active} active | "
        f"{metrics.due_soon} due ≤{days}d | {metrics.overdue} overdue | "
        f"view: {repl_context.state.view}"
    )
    return HTML(f"<style bg='#444444' fg='#ffffff'> {toolbar_text} </style>")


def get_right_prompt() -> HTML:
    """Right prompt with the number of tasks in view."""
    try:
        projections = repl_context.projections()
    except PcrmError:
        return HTML("")

    if repl_context.state.is_filtered:
        return HTML(f"<style fg='#888888'>[{len(projections.visible)} in view]</style>")
    return HTML(f"<style fg='#888888'>[{projections.metrics.total} total]</style>")


# Import command handlers from command modules
from .commands import (
    # Task handlers
    handle_add_command,
    handle_edit_command,
    handle_rm_command,
    handle_done_command,
    handle_show_command,
    handle_step_command,
    # View handlers
    handle_ls_command,
    handle_view_command,
    handle_cat_command,
    handle_status_command,
    handle_sort_command,
    handle_search_command,
    handle_cal_command,
    handle_stats_command,
    # Transfer handlers
    handle_export_command,
    handle_import_command,
    # System handlers
    handle_help_command,
    handle_clear_command,
)


def execute_command(result: ParseResult) -> bool:
    """
    Execute a parsed command.

    Args:
        result: Parsed command from parser

    Returns:
        True to continue REPL loop, False to exit

    Dispatches to appropriate handler based on command name.
    """
    command = result.command.lower()

    # Exit commands
    if command in ("exit", "quit"):
        console.print("[dim]Goodbye![/dim]")
        return False

    # Empty command (just Enter pressed)
    if not command:
        return True

    handlers = {
        "add": handle_add_command,
        "edit": handle_edit_command,
        "rm": handle_rm_command,
        "done": handle_done_command,
        "show": handle_show_command,
        "step": handle_step_command,
        "ls": handle_ls_command,
        "view": handle_view_command,
        "cat": handle_cat_command,
        "status": handle_status_command,
        "sort": handle_sort_command,
        "search": handle_search_command,
        "cal": handle_cal_command,
        "stats": handle_stats_command,
        "export": handle_export_command,
        "import": handle_import_command,
        "help": handle_help_command,
        "clear": handle_clear_command,
    }

    handler = handlers.get(command)
    if handler:
        handler(result)
        # Add whitespace after command output for readability
        console.print()
    else:
        console.print(f"[red]Unknown command:[/red] {command}")
        console.print("[dim]Type 'help' for available commands[/dim]")
        console.print()

    return True


def run_repl() -> None:
    """
    Main REPL loop.

    Sets up prompt_toolkit session with:
    - Command history (in-memory, not persisted)
    - Autocomplete (commands, categories, statuses, task ids)
    - Metrics toolbar

    Exits on:
    - Ctrl+D (EOFError)
    - "exit" or "quit" commands
    """
    # In piped/test environments, skip prompt_toolkit entirely
    has_tty = sys.stdin.isatty() and sys.stdout.isatty()

    session = None
    use_simple_input = not has_tty

    if has_tty:
        try:
            session = PromptSession(
                history=InMemoryHistory(),
                completer=create_completer(repl_context),
                complete_while_typing=True,
                bottom_toolbar=get_bottom_toolbar,
                rprompt=get_right_prompt,
            )
        except Exception as e:
            console.print(f"[yellow]Warning:[/yellow] Running in simple input mode: {e}")
            use_simple_input = True

    console.print("[bold cyan]pcrm REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if use_simple_input:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    while True:
        try:
            if use_simple_input or session is None:
                user_input = input(repl_context.get_prompt())
            else:
                user_input = session.prompt(format_prompt())

            result = parse_command(user_input)

            # Execute command (returns False to exit)
            if not execute_command(result):
                break

        except KeyboardInterrupt:
            console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
            continue
        except EOFError:
            console.print()
            console.print("[dim]Goodbye![/dim]")
            break
        except PcrmError as e:
            # Unexpected error - show but don't crash
            logger.exception("Command failed: %s", e)
            console.print(f"[red]Unexpected error:[/red] {e}")


def main() -> None:
    """
    Entry point for REPL mode.

    Called when user runs: pcrm repl
    """
    try:
        run_repl()
    except PcrmError as e:
        console.print(f"[red]Fatal error:[/red] {e}")
        sys.exit(1)
