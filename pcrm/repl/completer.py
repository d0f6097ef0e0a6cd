"""
FILE: pcrm/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - PcrmCompleter (Completer for command/arg completion)
  - create_completer(context) -> PcrmCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - typing (type hints)
  - pcrm.core.constants (categories, statuses, sort keys, views)
NOTES:
  - Suggests command names when at start of line
  - Suggests step subcommands after "step"
  - Suggests categories after "cat" and --category
  - Suggests statuses after "status" and --status
  - Suggests sort keys after "sort", views after "view", actions after "cal"
  - Suggests task IDs for commands expecting IDs (needs a REPL context)
  - Case-insensitive matching
"""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import (
    CATEGORIES,
    STATUSES,
    STATUS_ALL,
    SORT_KEYS,
    VIEWS,
    CALENDAR_MODES,
)


class PcrmCompleter(Completer):
    """
    Custom completer for the pcrm REPL.

    Provides context-aware autocomplete:
    - Command names at start of input
    - Values for the view-state commands (cat, status, sort, view, cal)
    - Flags after command names, and values after --category/--status
    - Task ids (with titles) where a command expects one
    """

    # Available commands
    COMMANDS = [
        "add", "edit", "rm", "done", "show", "step", "ls", "view", "cat",
        "status", "sort", "search", "cal", "stats", "export", "import",
        "help", "clear", "exit", "quit",
    ]

    # Step subcommands
    STEP_SUBCOMMANDS = ["add", "ls", "rm", "done"]

    # Calendar actions (modes plus navigation)
    CAL_ACTIONS = list(CALENDAR_MODES) + ["prev", "next", "today"]

    # Command-specific flags
    COMMAND_FLAGS = {
        "add": ["--category", "--status", "--due", "--desc"],
        "edit": ["--title", "--category", "--status", "--due", "--no-due", "--desc"],
        "step": ["--due"],
    }

    # Commands whose first argument is a task id
    ID_FIRST_COMMANDS = {"edit", "rm", "done", "show"}

    def __init__(self, context=None):
        # REPLContext, used only for task id suggestions
        self.context = context

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on current input.

        Args:
            document: Current document with cursor position
            complete_event: Event that triggered completion

        Yields:
            Completion objects for matching suggestions
        """
        text_before_cursor = document.text_before_cursor
        words = text_before_cursor.split()
        at_new_word = text_before_cursor.endswith(" ")

        # Empty input or typing the first word -> suggest commands
        if not words or (not at_new_word and len(words) == 1):
            word = words[0] if words else ""
            yield from self._complete_commands(word)
            return

        command = words[0].lower()
        # Index of the word being completed and its partial text
        position = len(words) if at_new_word else len(words) - 1
        current = "" if at_new_word else words[-1]
        previous = words[position - 1]

        # Values after --category / --status flags
        if previous == "--category":
            yield from self._complete_values(current, CATEGORIES)
            return
        if previous == "--status":
            yield from self._complete_values(current, STATUSES)
            return

        if current.startswith("--"):
            yield from self._complete_flags(command, current)
            return

        if command == "step":
            if position == 1:
                yield from self._complete_values(current, self.STEP_SUBCOMMANDS)
            elif position == 2:
                yield from self._complete_task_ids(current)
            return

        if command in self.ID_FIRST_COMMANDS and position == 1:
            yield from self._complete_task_ids(current)
            return

        if position != 1:
            return

        if command == "cat":
            yield from self._complete_values(current, list(CATEGORIES) + ["all", "none"])
        elif command == "status":
            yield from self._complete_values(current, list(STATUSES) + [STATUS_ALL])
        elif command == "sort":
            yield from self._complete_values(current, SORT_KEYS)
        elif command == "view":
            yield from self._complete_values(current, VIEWS)
        elif command == "cal":
            yield from self._complete_values(current, self.CAL_ACTIONS)

    def _complete_commands(self, word: str) -> Iterable[Completion]:
        """
        Complete command names.

        Args:
            word: Partial command being typed

        Yields:
            Completion objects for matching commands
        """
        word_lower = word.lower()
        for command in self.COMMANDS:
            if command.startswith(word_lower):
                yield Completion(
                    command,
                    start_position=-len(word),
                    display=command,
                    display_meta=self._get_command_description(command),
                )

    def _complete_flags(self, command: str, word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for flag in self.COMMAND_FLAGS.get(command, []):
            if flag.startswith(word_lower):
                yield Completion(flag, start_position=-len(word), display=flag)

    def _complete_values(self, word: str, values: Iterable[str]) -> Iterable[Completion]:
        """Complete from a fixed list of values (case-insensitive prefix match)."""
        word_lower = word.lower()
        for value in values:
            if value.lower().startswith(word_lower):
                yield Completion(value, start_position=-len(word), display=value)

    def _complete_task_ids(self, word: str) -> Iterable[Completion]:
        """
        Complete task IDs (short form) with the title and category as label.
        """
        if self.context is None:
            return
        tasks = self.context.get_store().tasks

        word_lower = word.lower()
        for t in tasks[:200]:  # cap for responsiveness
            if t.id.startswith(word_lower):
                title = t.title.strip()
                display_title = title if len(title) <= 40 else title[:37] + "..."
                yield Completion(
                    t.short_id,
                    start_position=-len(word),
                    display=t.short_id,
                    display_meta=f"{display_title} [{t.category}]",
                )

    @staticmethod
    def _get_command_description(command: str) -> str:
        """Get description for a command (shown in autocomplete menu)."""
        descriptions = {
            "add": "Create a new task",
            "edit": "Edit task fields",
            "rm": "Delete task",
            "done": "Toggle Completed/Active",
            "show": "View full task details",
            "step": "Manage next steps",
            "ls": "Show the current view",
            "view": "Switch view (grid, table, calendar)",
            "cat": "Toggle a category filter",
            "status": "Set the status filter",
            "sort": "Set the sort key",
            "search": "Search tasks",
            "cal": "Calendar view and navigation",
            "stats": "Show metrics",
            "export": "Export tasks to JSON",
            "import": "Replace tasks from JSON",
            "help": "Show available commands",
            "clear": "Clear the screen",
            "exit": "Exit REPL",
            "quit": "Exit REPL",
        }
        return descriptions.get(command, "")


def create_completer(context=None) -> PcrmCompleter:
    """
    Create and return a PcrmCompleter instance.

    Args:
        context: REPLContext whose store supplies task ids (optional)

    Usage:
        completer = create_completer(repl_context)
        session = PromptSession(completer=completer)
    """
    return PcrmCompleter(context)
