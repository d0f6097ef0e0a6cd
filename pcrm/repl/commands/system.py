"""
FILE: pcrm/repl/commands/system.py
PURPOSE: System command handlers for REPL
"""

from ..main import console
from ..parser import ParseResult


def handle_help_command(result: ParseResult) -> None:
    """
    Handle 'help' command - show available commands.

    Args:
        result: Parsed command (unused)
    """
    help_text = """
[bold cyan]Available Commands:[/bold cyan]

  [cyan]add <title> [--category C] [--status S] [--due D] [--desc T][/cyan]
                                 Create a new task
  [cyan]edit <id> [<title>] [--flags][/cyan]   Edit fields (--title --category --status --due --no-due --desc)
  [cyan]rm <id>[,<id>...][/cyan]               Delete task(s)
  [cyan]done <id>[,<id>...][/cyan]             Toggle Completed/Active
  [cyan]show <id>[/cyan]                       View full task details
  [cyan]step add <id> <text> [--due D][/cyan]  Add a next step
  [cyan]step ls|rm|done <id> [<step#>][/cyan]  List, remove or toggle next steps

  [cyan]ls[/cyan]                              Show the active view
  [cyan]view grid|table|calendar[/cyan]        Switch view
  [cyan]cat <category>...|all|none[/cyan]      Toggle category filters
  [cyan]status <status>|all[/cyan]             Set the status filter
  [cyan]sort due|created|category[/cyan]       Set the sort key
  [cyan]search [<text>][/cyan]                 Search (no text clears)
  [cyan]cal [<mode>|prev|next|today|<date>][/cyan]
                                 Calendar view and navigation
  [cyan]stats[/cyan]                           Board metrics

  [cyan]export [<path>][/cyan]                 Export tasks to JSON
  [cyan]import <file>[/cyan]                   Replace tasks from JSON
  [cyan]help[/cyan]                            Show this help
  [cyan]clear[/cyan]                           Clear the screen
  [cyan]exit[/cyan] / [cyan]quit[/cyan]                     Exit REPL (or Ctrl+D)

[dim]Task ids accept any unique prefix. Categories, statuses and sort keys
are case-insensitive and can be shortened (fam -> Family).[/dim]
"""
    console.print(help_text)


def handle_clear_command(result: ParseResult) -> None:
    """
    Handle 'clear' command - clear the screen.

    Args:
        result: Parsed command (unused)
    """
    console.clear()
