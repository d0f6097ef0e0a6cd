"""
FILE: pcrm/core/dates.py
PURPOSE: Calendar arithmetic and due-date predicates
EXPORTS:
  - parse_iso_date(value) -> Optional[date]
  - is_overdue(value, today) -> bool
  - is_due_within_days(value, days, today) -> bool
  - start_of_month(d), start_of_week(d, week_starts_on), add_days(d, n)
  - add_months(d, n), is_same_month(a, b), is_same_day(a, b)
  - format_date_short(value) -> str
  - format_day_heading(d, with_year) -> str
  - format_month_title(d) -> str
DEPENDENCIES:
  - datetime (stdlib)
  - typing (type hints)
NOTES:
  - Due dates are timezone-naive calendar dates ("YYYY-MM-DD")
  - Comparisons use the date component only, against local date.today()
  - Unparsable values behave exactly like absent ones
  - `today` is injectable so predicates are deterministic under test
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from .constants import DUE_SOON_DAYS, WEEK_STARTS_ON, EMPTY_LABEL

DateLike = Union[date, datetime, str, None]


def parse_iso_date(value: DateLike) -> Optional[date]:
    """
    Coerce a date-like value to a calendar date.

    Args:
        value: date, datetime, ISO string ("2024-06-01" or a full timestamp),
               or None

    Returns:
        The calendar date, or None for absent/unparsable input
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    try:
        # Only the date component matters; drop any time suffix
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def is_overdue(value: DateLike, today: Optional[date] = None) -> bool:
    """
    Check whether a due date has passed.

    The end of the due day is the deadline, so a task due today is not
    overdue until tomorrow.
    """
    due = parse_iso_date(value)
    if due is None:
        return False
    return due < _today(today)


def is_due_within_days(
    value: DateLike,
    days: int = DUE_SOON_DAYS,
    today: Optional[date] = None,
) -> bool:
    """
    Check whether a due date falls in [today, today + days], inclusive.

    Past dates are never "due soon" (they are overdue instead).
    """
    due = parse_iso_date(value)
    if due is None:
        return False
    start = _today(today)
    return start <= due <= start + timedelta(days=days)


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def start_of_week(d: date, week_starts_on: int = WEEK_STARTS_ON) -> date:
    """
    Return the first day of the week containing `d`.

    Args:
        d: Any date
        week_starts_on: 0 = Sunday, 1 = Monday, ... 6 = Saturday
    """
    # date.weekday() is Monday=0; shift to Sunday=0
    day_index = (d.weekday() + 1) % 7
    diff = (day_index + 7 - week_starts_on) % 7
    return add_days(d, -diff)


def add_months(d: date, n: int) -> date:
    """Return the first day of the month `n` months away from `d`."""
    month_index = d.year * 12 + (d.month - 1) + n
    return date(month_index // 12, month_index % 12 + 1, 1)


def is_same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def is_same_day(a: date, b: date) -> bool:
    return a == b


def format_date_short(value: DateLike) -> str:
    """
    Format a date as abbreviated month and day ("Jun 1").

    Returns "—" for absent or unparsable dates.
    """
    d = parse_iso_date(value)
    if d is None:
        return EMPTY_LABEL
    return f"{d:%b} {d.day}"


def format_day_heading(d: date, with_year: bool = False) -> str:
    """Format a calendar heading like "Saturday, Jun 1" (optionally ", 2024")."""
    heading = f"{d:%A}, {d:%b} {d.day}"
    if with_year:
        heading += f", {d.year}"
    return heading


def format_month_title(d: date) -> str:
    """Format a month title like "June 2024"."""
    return f"{d:%B} {d.year}"
