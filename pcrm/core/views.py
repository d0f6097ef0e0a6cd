"""
FILE: pcrm/core/views.py
PURPOSE: View engine: pure projections of the task list for display
EXPORTS:
  - ViewState (frozen dataclass, immutable UI state)
  - Metrics, CalendarDay, CalendarView, Projections (frozen dataclasses)
  - filter_tasks(tasks, categories, status, query) -> List[Task]
  - sort_tasks(tasks, sort_key) -> List[Task]
  - group_by_category(tasks) -> Dict[str, List[Task]]
  - compute_metrics(tasks, today, due_soon_days) -> Metrics
  - nearest_next_step(task) -> Optional[NextStep]
  - tasks_on(tasks, day) -> List[Task]
  - month_grid(tasks, cursor, today) -> List[CalendarDay]
  - week_days(tasks, cursor, today) -> List[CalendarDay]
  - build_calendar(tasks, state, today) -> CalendarView
  - project(tasks, state, today, due_soon_days) -> Projections
  - ViewEngine (memoizing wrapper around project())
DEPENDENCIES:
  - dataclasses, datetime, typing (stdlib)
  - pcrm.core.dates (calendar arithmetic, due predicates)
  - pcrm.core.models (Task, NextStep)
NOTES:
  - Every function here is pure: same inputs, same outputs, inputs untouched
  - UI actions never mutate a ViewState; they get a new one back
  - Metrics and the calendar use the FULL task list; filter/sort/group use
    the view state's filters
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import (
    CATEGORIES,
    STATUSES,
    STATUS_ALL,
    STATUS_COMPLETED,
    SORT_KEYS,
    SORT_DUE_DATE,
    SORT_CREATED_AT,
    SORT_CATEGORY,
    DEFAULT_SORT_KEY,
    NO_DUE_DATE_SENTINEL,
    VIEWS,
    VIEW_GRID,
    CALENDAR_MODES,
    CALENDAR_MONTH,
    CALENDAR_WEEK,
    CALENDAR_CELLS,
    CALENDAR_MAX_SHOWN,
    DUE_SOON_DAYS,
    WEEK_STARTS_ON,
)
from .dates import (
    add_days,
    add_months,
    is_due_within_days,
    is_overdue,
    is_same_day,
    is_same_month,
    parse_iso_date,
    start_of_month,
    start_of_week,
)
from .exceptions import InvalidInputError
from .models import Task, NextStep


# --- View State ---


@dataclass(frozen=True)
class ViewState:
    """
    Everything the user can change about what is shown.

    Attributes:
        active_categories: Categories currently shown (default: all five)
        status_filter: A status, or "All"
        query: Free-text search (matched trimmed and case-folded)
        sort_key: "dueDate", "createdAt" or "category"
        view: "grid", "table" or "calendar"
        calendar_cursor: Date the calendar is positioned on
        calendar_mode: "month", "week" or "day"
    """
    active_categories: Tuple[str, ...] = CATEGORIES
    status_filter: str = STATUS_ALL
    query: str = ""
    sort_key: str = DEFAULT_SORT_KEY
    view: str = VIEW_GRID
    calendar_cursor: date = field(default_factory=date.today)
    calendar_mode: str = CALENDAR_MONTH

    def toggle_category(self, category: str) -> "ViewState":
        """Hide a shown category, or show a hidden one (appended last)."""
        if category not in CATEGORIES:
            raise InvalidInputError(f"Unknown category '{category}'")
        if category in self.active_categories:
            active = tuple(c for c in self.active_categories if c != category)
        else:
            active = self.active_categories + (category,)
        return dataclasses.replace(self, active_categories=active)

    def with_categories(self, categories: Iterable[str]) -> "ViewState":
        categories = tuple(categories)
        for category in categories:
            if category not in CATEGORIES:
                raise InvalidInputError(f"Unknown category '{category}'")
        return dataclasses.replace(self, active_categories=categories)

    def with_status(self, status: str) -> "ViewState":
        if status != STATUS_ALL and status not in STATUSES:
            raise InvalidInputError(f"Unknown status '{status}'")
        return dataclasses.replace(self, status_filter=status)

    def with_query(self, query: str) -> "ViewState":
        return dataclasses.replace(self, query=query)

    def with_sort(self, sort_key: str) -> "ViewState":
        if sort_key not in SORT_KEYS:
            raise InvalidInputError(f"Unknown sort key '{sort_key}'")
        return dataclasses.replace(self, sort_key=sort_key)

    def with_view(self, view: str) -> "ViewState":
        if view not in VIEWS:
            raise InvalidInputError(f"Unknown view '{view}'")
        return dataclasses.replace(self, view=view)

    def with_calendar_mode(self, mode: str) -> "ViewState":
        if mode not in CALENDAR_MODES:
            raise InvalidInputError(f"Unknown calendar mode '{mode}'")
        return dataclasses.replace(self, calendar_mode=mode)

    def with_cursor(self, cursor: date) -> "ViewState":
        return dataclasses.replace(self, calendar_cursor=cursor)

    def calendar_today(self, today: Optional[date] = None) -> "ViewState":
        return self.with_cursor(today or date.today())

    def calendar_prev_month(self) -> "ViewState":
        """Move the cursor to the first day of the previous month."""
        return self.with_cursor(add_months(self.calendar_cursor, -1))

    def calendar_next_month(self) -> "ViewState":
        """Move the cursor to the first day of the next month."""
        return self.with_cursor(add_months(self.calendar_cursor, 1))

    @property
    def is_filtered(self) -> bool:
        """True if any filter hides tasks."""
        return (
            set(self.active_categories) != set(CATEGORIES)
            or self.status_filter != STATUS_ALL
            or bool(self.query.strip())
        )


# --- Filter / Sort / Group ---


def matches_query(task: Task, query: str) -> bool:
    """
    Case-insensitive substring search over title, description and next steps.

    An empty (or whitespace-only) query matches everything.
    """
    q = query.strip().casefold()
    if not q:
        return True
    return (
        q in task.title.casefold()
        or q in (task.description or "").casefold()
        or any(q in step.text.casefold() for step in task.next_steps)
    )


def filter_tasks(
    tasks: Iterable[Task],
    active_categories: Sequence[str] = CATEGORIES,
    status_filter: str = STATUS_ALL,
    query: str = "",
) -> List[Task]:
    """
    Keep tasks in an active category, with the selected status, matching the query.

    Returns:
        New list; input order preserved
    """
    result = [t for t in tasks if t.category in active_categories]
    if status_filter != STATUS_ALL:
        result = [t for t in result if t.status == status_filter]
    if query.strip():
        result = [t for t in result if matches_query(t, query)]
    return result


def _due_date_key(task: Task) -> str:
    return task.due_date or NO_DUE_DATE_SENTINEL


def sort_tasks(tasks: Iterable[Task], sort_key: str = DEFAULT_SORT_KEY) -> List[Task]:
    """
    Stable sort into a new list.

    - dueDate: ascending, tasks without a due date last
    - createdAt: newest first
    - category: alphabetical by category name
    """
    tasks = list(tasks)
    if sort_key == SORT_DUE_DATE:
        return sorted(tasks, key=_due_date_key)
    if sort_key == SORT_CREATED_AT:
        # reverse=True keeps equal keys in their original order
        return sorted(tasks, key=lambda t: t.created_at or "", reverse=True)
    if sort_key == SORT_CATEGORY:
        return sorted(tasks, key=lambda t: t.category)
    raise InvalidInputError(f"Unknown sort key '{sort_key}'")


def group_by_category(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    """
    Partition tasks into the five category buckets, in declaration order.

    Order inside each bucket follows the input order. Tasks whose category
    is not one of the five (possible after a raw import) are left out.
    """
    groups: Dict[str, List[Task]] = {c: [] for c in CATEGORIES}
    for task in tasks:
        if task.category in groups:
            groups[task.category].append(task)
    return groups


# --- Metrics ---


@dataclass(frozen=True)
class Metrics:
    """Summary counts over the full (unfiltered) task list."""
    total: int
    overdue: int
    due_soon: int
    active: int
    counts: Dict[str, int]


def compute_metrics(
    tasks: Sequence[Task],
    today: Optional[date] = None,
    due_soon_days: int = DUE_SOON_DAYS,
) -> Metrics:
    return Metrics(
        total=len(tasks),
        overdue=sum(1 for t in tasks if is_overdue(t.due_date, today)),
        due_soon=sum(1 for t in tasks if is_due_within_days(t.due_date, due_soon_days, today)),
        active=sum(1 for t in tasks if t.status != STATUS_COMPLETED),
        counts={c: sum(1 for t in tasks if t.category == c) for c in CATEGORIES},
    )


# --- Next Steps ---


def nearest_next_step(task: Task) -> Optional[NextStep]:
    """
    Pick the next step to summarize a task with.

    Earliest dated step wins (ties go to the earlier one in the list);
    with no dated steps, the first step; with no steps, None.
    """
    if not task.next_steps:
        return None
    dated = [step for step in task.next_steps if step.due_date]
    if not dated:
        return task.next_steps[0]
    # min() returns the first of equal keys
    return min(dated, key=lambda step: step.due_date)


# --- Calendar ---


@dataclass(frozen=True)
class CalendarDay:
    """
    One calendar cell.

    Attributes:
        day: The date of the cell
        in_month: Whether the day belongs to the cursor's month
        is_today: Whether the day is the real current date
        tasks: Every task due (or with a next step due) that day
        limit: How many tasks the cell shows (None = all)
    """
    day: date
    in_month: bool
    is_today: bool
    tasks: Tuple[Task, ...]
    limit: Optional[int] = None

    @property
    def shown(self) -> Tuple[Task, ...]:
        if self.limit is None:
            return self.tasks
        return self.tasks[:self.limit]

    @property
    def overflow(self) -> int:
        return len(self.tasks) - len(self.shown)


@dataclass(frozen=True)
class CalendarView:
    mode: str
    cursor: date
    days: Tuple[CalendarDay, ...]


def tasks_on(tasks: Iterable[Task], day: date) -> List[Task]:
    """Tasks due on `day`, or with any next step due on `day`."""
    result = []
    for task in tasks:
        if parse_iso_date(task.due_date) == day or any(
            parse_iso_date(step.due_date) == day for step in task.next_steps
        ):
            result.append(task)
    return result


def _calendar_day(
    tasks: Sequence[Task],
    day: date,
    cursor: date,
    today: date,
    limit: Optional[int] = None,
) -> CalendarDay:
    return CalendarDay(
        day=day,
        in_month=is_same_month(day, cursor),
        is_today=is_same_day(day, today),
        tasks=tuple(tasks_on(tasks, day)),
        limit=limit,
    )


def month_grid(
    tasks: Sequence[Task],
    cursor: date,
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """
    Build the 6x7 month grid for the cursor's month.

    The grid starts on the Sunday on/before the first of the month and always
    has 42 cells, spilling into the neighbouring months. Each cell shows at
    most three tasks.
    """
    today = today or date.today()
    grid_start = start_of_week(start_of_month(cursor), WEEK_STARTS_ON)
    return [
        _calendar_day(tasks, add_days(grid_start, i), cursor, today, CALENDAR_MAX_SHOWN)
        for i in range(CALENDAR_CELLS)
    ]


def week_days(
    tasks: Sequence[Task],
    cursor: date,
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """The seven days (Sunday first) of the week containing the cursor."""
    today = today or date.today()
    start = start_of_week(cursor, WEEK_STARTS_ON)
    return [_calendar_day(tasks, add_days(start, i), cursor, today) for i in range(7)]


def build_calendar(
    tasks: Sequence[Task],
    state: ViewState,
    today: Optional[date] = None,
) -> CalendarView:
    """Build the calendar for the state's mode and cursor."""
    today = today or date.today()
    cursor = state.calendar_cursor
    if state.calendar_mode == CALENDAR_MONTH:
        days = month_grid(tasks, cursor, today)
    elif state.calendar_mode == CALENDAR_WEEK:
        days = week_days(tasks, cursor, today)
    else:
        days = [_calendar_day(tasks, cursor, cursor, today)]
    return CalendarView(mode=state.calendar_mode, cursor=cursor, days=tuple(days))


# --- Projections ---


@dataclass(frozen=True)
class Projections:
    """All derived outputs for one task snapshot and one view state."""
    visible: List[Task]
    by_category: Dict[str, List[Task]]
    metrics: Metrics
    calendar: CalendarView


def project(
    tasks: Sequence[Task],
    state: ViewState,
    today: Optional[date] = None,
    due_soon_days: int = DUE_SOON_DAYS,
) -> Projections:
    """
    Run the whole pipeline: filter -> sort -> group, plus metrics and calendar.
    """
    today = today or date.today()
    visible = sort_tasks(
        filter_tasks(tasks, state.active_categories, state.status_filter, state.query),
        state.sort_key,
    )
    return Projections(
        visible=visible,
        by_category=group_by_category(visible),
        metrics=compute_metrics(tasks, today, due_soon_days),
        calendar=build_calendar(tasks, state, today),
    )


class ViewEngine:
    """
    Memoizes project() on the last inputs.

    The task snapshot is compared by identity (the store swaps in a new
    tuple on every mutation); the view state and today by value.
    """

    def __init__(self, due_soon_days: int = DUE_SOON_DAYS):
        self.due_soon_days = due_soon_days
        self._last_tasks: Optional[Sequence[Task]] = None
        self._last_key: Optional[Tuple[ViewState, date]] = None
        self._last_result: Optional[Projections] = None

    def project(
        self,
        tasks: Sequence[Task],
        state: ViewState,
        today: Optional[date] = None,
    ) -> Projections:
        today = today or date.today()
        key = (state, today)
        if self._last_result is not None and tasks is self._last_tasks and key == self._last_key:
            return self._last_result
        result = project(tasks, state, today, self.due_soon_days)
        self._last_tasks = tasks
        self._last_key = key
        self._last_result = result
        return result
