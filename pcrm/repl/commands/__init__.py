"""
FILE: pcrm/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

# Export all command handlers for easy importing
from .tasks import (
    handle_add_command,
    handle_edit_command,
    handle_rm_command,
    handle_done_command,
    handle_show_command,
    handle_step_command,
)
from .views import (
    handle_ls_command,
    handle_view_command,
    handle_cat_command,
    handle_status_command,
    handle_sort_command,
    handle_search_command,
    handle_cal_command,
    handle_stats_command,
)
from .transfer import (
    handle_export_command,
    handle_import_command,
)
from .system import (
    handle_help_command,
    handle_clear_command,
)

__all__ = [
    "handle_add_command",
    "handle_edit_command",
    "handle_rm_command",
    "handle_done_command",
    "handle_show_command",
    "handle_step_command",
    "handle_ls_command",
    "handle_view_command",
    "handle_cat_command",
    "handle_status_command",
    "handle_sort_command",
    "handle_search_command",
    "handle_cal_command",
    "handle_stats_command",
    "handle_export_command",
    "handle_import_command",
    "handle_help_command",
    "handle_clear_command",
]
