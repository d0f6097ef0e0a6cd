"""
FILE: pcrm/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    edit,
    rm,
    done,
    show,
)
from .steps import (
    step_add,
    step_ls,
    step_rm,
    step_done,
)
from .views import (
    ls,
    grid,
    cal,
    stats,
)
from .transfer import (
    export,
    import_,
)
from .system import (
    version,
    help,
    repl,
)

__all__ = [
    "add",
    "edit",
    "rm",
    "done",
    "show",
    "step_add",
    "step_ls",
    "step_rm",
    "step_done",
    "ls",
    "grid",
    "cal",
    "stats",
    "export",
    "import_",
    "version",
    "help",
    "repl",
]
