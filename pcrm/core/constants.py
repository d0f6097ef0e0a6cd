"""
FILE: pcrm/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - CATEGORIES: The five fixed task categories, in declaration order
  - STATUSES: All valid task statuses
  - SORT_KEYS, VIEWS, CALENDAR_MODES: Valid view-state values
  - STORAGE_KEY: Name of the persisted record
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic strings
  - Categories and statuses are closed sets (not user-extensible)
"""

# Task categories (declaration order is display and grouping order)
CATEGORY_DEALERSHIP = "Dealership"
CATEGORY_FAMILY = "Family"
CATEGORY_BUSINESS = "Business"
CATEGORY_SPIRITUAL = "Spiritual"
CATEGORY_PERSONAL = "Personal"
CATEGORIES = (
    CATEGORY_DEALERSHIP,
    CATEGORY_FAMILY,
    CATEGORY_BUSINESS,
    CATEGORY_SPIRITUAL,
    CATEGORY_PERSONAL,
)

# Task status constants
STATUS_ACTIVE = "Active"
STATUS_PENDING = "Pending"
STATUS_COMPLETED = "Completed"
STATUSES = (STATUS_ACTIVE, STATUS_PENDING, STATUS_COMPLETED)
STATUS_ALL = "All"

# Defaults for new tasks
DEFAULT_CATEGORY = CATEGORY_DEALERSHIP
DEFAULT_STATUS = STATUS_ACTIVE

# Sort keys
SORT_DUE_DATE = "dueDate"
SORT_CREATED_AT = "createdAt"
SORT_CATEGORY = "category"
SORT_KEYS = (SORT_DUE_DATE, SORT_CREATED_AT, SORT_CATEGORY)
DEFAULT_SORT_KEY = SORT_DUE_DATE

# Absent due dates sort after every real ISO date
NO_DUE_DATE_SENTINEL = "9999"

# Views
VIEW_GRID = "grid"
VIEW_TABLE = "table"
VIEW_CALENDAR = "calendar"
VIEWS = (VIEW_GRID, VIEW_TABLE, VIEW_CALENDAR)

# Calendar
CALENDAR_MONTH = "month"
CALENDAR_WEEK = "week"
CALENDAR_DAY = "day"
CALENDAR_MODES = (CALENDAR_MONTH, CALENDAR_WEEK, CALENDAR_DAY)
CALENDAR_CELLS = 42
CALENDAR_MAX_SHOWN = 3
WEEK_STARTS_ON = 0  # Sunday
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# Due-soon window (days from today, inclusive)
DUE_SOON_DAYS = 3

# Persistence
STORAGE_KEY = "personal_crm_tasks_v1"
EXPORT_PREFIX = "personal-crm-tasks"

# Display placeholder for absent dates and next steps
EMPTY_LABEL = "—"
