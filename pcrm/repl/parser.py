"""
FILE: pcrm/repl/parser.py
PURPOSE: Parse user input into commands and arguments for REPL
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
  - split_refs(args) -> List[str]
DEPENDENCIES:
  - shlex (for shell-like parsing with quotes)
  - dataclasses (for ParseResult)
  - typing (type hints)
NOTES:
  - Handles quoted strings: add "task with spaces"
  - Supports flags: --due 2024-06-01, --due=2024-06-01, --category family
  - Preserves argument order for positional args
  - Case-insensitive command names
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "add", "ls", "done")
        args: Positional arguments (e.g., ["task title", "3f2a"])
        flags: Flag arguments as dict (e.g., {"due": "2024-06-01", "json": True})
        raw_input: Original input string
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, Union[str, bool]] = field(default_factory=dict)
    raw_input: str = ""

    @property
    def text(self) -> str:
        """All positional args joined back into one string (unquoted titles)."""
        return " ".join(self.args)

    def value(self, *names: str) -> Optional[str]:
        """String value of the first flag present among `names` (a bare flag gives "")."""
        for name in names:
            if name in self.flags:
                value = self.flags[name]
                return "" if value is True else value
        return None


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command("add Call Mike")
        ParseResult(command="add", args=["Call", "Mike"], flags={})

        >>> parse_command('add "Call Mike" --category family')
        ParseResult(command="add", args=["Call Mike"], flags={"category": "family"})

        >>> parse_command("edit 3f2a --due=2024-06-01")
        ParseResult(command="edit", args=["3f2a"], flags={"due": "2024-06-01"})

    Args:
        input_str: Raw user input from REPL prompt

    Returns:
        ParseResult with command, args, and flags extracted

    Notes:
        - Command is always the first token (case-insensitive)
        - Flags start with -- (e.g., --status, --due)
        - Boolean flags don't need values (--no-due sets no-due=True)
        - Value flags take the next token (--due 2024-06-01) or "=" (--due=2024-06-01)
        - Quoted strings are treated as single args; "" is an empty value
        - Empty input returns command="" with no args/flags
    """
    input_str = input_str.strip()
    if not input_str:
        return ParseResult(command="", args=[], flags={}, raw_input=input_str)

    # shlex.split handles: add "task with spaces" --category family
    try:
        tokens = shlex.split(input_str)
    except ValueError:
        # Unclosed quote, fall back to a plain split
        tokens = input_str.split()

    if not tokens:
        return ParseResult(command="", args=[], flags={}, raw_input=input_str)

    command = tokens[0].lower()

    args = []
    flags = {}
    i = 1

    while i < len(tokens):
        token = tokens[i]

        if token.startswith("--") and len(token) > 2:
            flag_name = token[2:]

            if "=" in flag_name:
                flag_name, flag_value = flag_name.split("=", 1)
                flags[flag_name.lower()] = flag_value
                i += 1
            elif i + 1 < len(tokens) and not tokens[i + 1].startswith("--"):
                flags[flag_name.lower()] = tokens[i + 1]
                i += 2
            else:
                flags[flag_name.lower()] = True
                i += 1
        else:
            args.append(token)
            i += 1

    return ParseResult(
        command=command,
        args=args,
        flags=flags,
        raw_input=input_str
    )


def split_refs(args: Iterable[str]) -> List[str]:
    """
    Expand comma-separated ids: ["3f2a,9bc1", "77"] -> ["3f2a", "9bc1", "77"].
    """
    refs = []
    for arg in args:
        refs.extend(ref.strip() for ref in arg.split(",") if ref.strip())
    return refs
