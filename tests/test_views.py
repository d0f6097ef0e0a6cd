"""
Test the view engine: filter, sort, group, metrics, next steps, calendar.
"""

# Path setup handled by conftest.py
from collections import Counter
from datetime import date

import pytest

from pcrm.core.constants import CATEGORIES
from pcrm.core.exceptions import InvalidInputError
from pcrm.core.views import (
    ViewState,
    ViewEngine,
    filter_tasks,
    sort_tasks,
    group_by_category,
    compute_metrics,
    nearest_next_step,
    month_grid,
    week_days,
    build_calendar,
    project,
)
from conftest import make_task, make_step


@pytest.fixture
def board():
    """A small board spanning every category and status."""
    return [
        make_task("d1", "Call Mike", "Dealership", due_date="2024-06-03",
                  created_at="2024-05-03T09:00:00"),
        make_task("f1", "Dinner with parents", "Family", "Pending", due_date="2024-06-10",
                  created_at="2024-05-05T09:00:00", description="Sunday roast"),
        make_task("b1", "Investor deck", "Business", due_date="2024-05-30",
                  created_at="2024-05-01T09:00:00",
                  next_steps=[make_step("s1", "Send NDA to Greg")]),
        make_task("s1", "Morning prayer", "Spiritual", created_at="2024-05-04T09:00:00"),
        make_task("p1", "Gym", "Personal", "Completed", due_date="2024-06-01",
                  created_at="2024-05-02T09:00:00"),
    ]


# --- Filter ---


def test_filter_by_category_status_and_query(board):
    """Each predicate narrows the list; input order is kept."""
    assert [t.id for t in filter_tasks(board, ("Family", "Business"))] == ["f1", "b1"]
    assert [t.id for t in filter_tasks(board, status_filter="Pending")] == ["f1"]
    assert [t.id for t in filter_tasks(board, query="  SUNDAY ")] == ["f1"]
    # Search also matches next step text
    assert [t.id for t in filter_tasks(board, query="greg")] == ["b1"]


def test_filter_is_idempotent(board):
    """Filtering twice with the same predicates changes nothing."""
    once = filter_tasks(board, ("Dealership", "Family", "Personal"), "Active", "")
    twice = filter_tasks(once, ("Dealership", "Family", "Personal"), "Active", "")
    assert once == twice


def test_filter_with_no_categories_hides_everything(board):
    """An empty category set shows no tasks."""
    assert filter_tasks(board, ()) == []


# --- Sort ---


def test_due_date_sort_puts_undated_last(board):
    """Dated tasks ascend; undated tasks come after all dated ones."""
    ordered = sort_tasks(board, "dueDate")
    assert [t.id for t in ordered] == ["b1", "p1", "d1", "f1", "s1"]


def test_created_sort_is_newest_first(board):
    """createdAt sorts descending."""
    assert [t.id for t in sort_tasks(board, "createdAt")] == ["f1", "s1", "d1", "p1", "b1"]


def test_category_sort_is_alphabetical(board):
    """category sorts by name, not declaration order."""
    names = [t.category for t in sort_tasks(board, "category")]
    assert names == sorted(names)


def test_sort_does_not_mutate_input(board):
    """Sorting returns a new list."""
    before = list(board)
    sort_tasks(board, "createdAt")
    assert board == before


def test_sort_rejects_unknown_key(board):
    """Unknown sort keys raise InvalidInputError."""
    with pytest.raises(InvalidInputError):
        sort_tasks(board, "priority")


# --- Group ---


def test_grouping_is_exhaustive_disjoint_partition(board):
    """Every task lands in exactly one of the five buckets."""
    visible = sort_tasks(filter_tasks(board), "dueDate")
    groups = group_by_category(visible)

    assert list(groups) == list(CATEGORIES)
    union = [t for c in CATEGORIES for t in groups[c]]
    assert Counter(t.id for t in union) == Counter(t.id for t in visible)
    for category, tasks in groups.items():
        assert all(t.category == category for t in tasks)


def test_grouping_keeps_empty_buckets():
    """Categories with no tasks still get an (empty) bucket."""
    groups = group_by_category([make_task("x", category="Family")])
    assert groups["Dealership"] == []
    assert [t.id for t in groups["Family"]] == ["x"]


# --- Metrics ---


def test_due_soon_counts_today_but_not_ten_days_out(today):
    """Task due today is due soon; task due in 10 days is not."""
    tasks = [
        make_task("now", due_date="2024-06-01"),
        make_task("later", due_date="2024-06-11"),
    ]
    metrics = compute_metrics(tasks, today, 3)
    assert metrics.due_soon == 1
    assert metrics.overdue == 0


def test_metrics_use_full_list(board, today):
    """Totals, active count, overdue and per-category counts."""
    metrics = compute_metrics(board, today)

    assert metrics.total == 5
    assert metrics.active == 4  # everything but Completed
    assert metrics.overdue == 1  # b1 due 05-30
    assert metrics.due_soon == 2  # p1 (today) and d1 (06-03)
    assert metrics.counts == {c: 1 for c in CATEGORIES}


# --- Nearest next step ---


def test_nearest_next_step_earliest_dated():
    """Earliest dated step wins regardless of list position."""
    task = make_task("t", next_steps=[
        make_step("a", "A", "2024-06-10"),
        make_step("b", "B", "2024-06-01"),
    ])
    assert nearest_next_step(task).text == "B"


def test_nearest_next_step_dated_beats_undated():
    """A dated step beats an undated one listed before it."""
    task = make_task("t", next_steps=[
        make_step("a", "A"),
        make_step("b", "B", "2024-06-01"),
    ])
    assert nearest_next_step(task).text == "B"


def test_nearest_next_step_first_undated():
    """With only undated steps, the first one is used."""
    task = make_task("t", next_steps=[make_step("a", "A"), make_step("b", "B")])
    assert nearest_next_step(task).text == "A"


def test_nearest_next_step_none():
    """No steps, no nearest step."""
    assert nearest_next_step(make_task("t")) is None


# --- Calendar ---


def test_month_grid_has_42_cells_starting_sunday(today):
    """June 2024 grid runs Sun May 26 .. Sat Jul 6."""
    cells = month_grid([], date(2024, 6, 15), today)

    assert len(cells) == 42
    assert cells[0].day == date(2024, 5, 26)
    assert cells[-1].day == date(2024, 7, 6)
    assert not cells[0].in_month
    assert cells[6].in_month and cells[6].day == date(2024, 6, 1)
    assert [c.day for c in cells if c.is_today] == [today]


def test_month_cell_caps_at_three_with_overflow(today):
    """A busy day shows three tasks plus an overflow count."""
    tasks = [make_task(str(i), due_date="2024-06-12") for i in range(5)]
    cells = month_grid(tasks, today, today)
    cell = next(c for c in cells if c.day == date(2024, 6, 12))

    assert len(cell.tasks) == 5
    assert len(cell.shown) == 3
    assert cell.overflow == 2


def test_task_appears_on_step_dates(today):
    """A task shows on its due date and on every next step date."""
    task = make_task("t", due_date="2024-06-20", next_steps=[
        make_step("a", due_date="2024-06-05"),
        make_step("b", due_date="2024-06-05"),
    ])
    cells = {c.day: c for c in month_grid([task], today, today)}

    assert [t.id for t in cells[date(2024, 6, 20)].tasks] == ["t"]
    # Listed once even with two steps that day
    assert [t.id for t in cells[date(2024, 6, 5)].tasks] == ["t"]
    assert cells[date(2024, 6, 6)].tasks == ()


def test_week_and_day_modes(today):
    """Week mode yields the cursor's Sunday-first week; day mode one cell."""
    days = week_days([], date(2024, 6, 5), today)
    assert [d.day for d in days] == [date(2024, 6, d) for d in range(2, 9)]

    state = ViewState(calendar_cursor=date(2024, 6, 5), calendar_mode="day")
    calendar = build_calendar([make_task("t", due_date="2024-06-05")], state, today)
    assert len(calendar.days) == 1
    assert [t.id for t in calendar.days[0].tasks] == ["t"]


# --- View state ---


def test_view_state_changes_return_new_values():
    """UI actions never mutate the current state."""
    state = ViewState(calendar_cursor=date(2024, 6, 15))
    hidden = state.toggle_category("Family")

    assert "Family" in state.active_categories
    assert "Family" not in hidden.active_categories
    # Re-enabling appends at the end
    assert hidden.toggle_category("Family").active_categories[-1] == "Family"

    assert state.calendar_next_month().calendar_cursor == date(2024, 7, 1)
    assert state.calendar_prev_month().calendar_cursor == date(2024, 5, 1)
    assert state.calendar_today(date(2024, 6, 1)).calendar_cursor == date(2024, 6, 1)
    assert state.calendar_cursor == date(2024, 6, 15)


def test_view_state_rejects_unknown_values():
    """Unknown categories, statuses, sort keys, views and modes are errors."""
    state = ViewState()
    with pytest.raises(InvalidInputError):
        state.toggle_category("Hobby")
    with pytest.raises(InvalidInputError):
        state.with_status("Blocked")
    with pytest.raises(InvalidInputError):
        state.with_sort("priority")
    with pytest.raises(InvalidInputError):
        state.with_view("kanban")
    with pytest.raises(InvalidInputError):
        state.with_calendar_mode("year")


def test_is_filtered():
    """Any narrowing filter marks the state as filtered."""
    state = ViewState()
    assert not state.is_filtered
    assert state.with_query("mike").is_filtered
    assert state.with_status("Active").is_filtered
    assert state.toggle_category("Family").is_filtered
    assert not state.with_query("   ").is_filtered


# --- Projections ---


def test_project_combines_pipeline(board, today):
    """Visible list is filtered + sorted; metrics and calendar see everything."""
    state = ViewState(calendar_cursor=today).with_status("Active")
    result = project(board, state, today)

    assert [t.id for t in result.visible] == ["b1", "d1", "s1"]
    assert [t.id for t in result.by_category["Business"]] == ["b1"]
    assert result.metrics.total == 5
    # Calendar ignores the status filter: the Completed task shows today
    today_cell = next(c for c in result.calendar.days if c.is_today)
    assert [t.id for t in today_cell.tasks] == ["p1"]


def test_view_engine_memoizes_on_identity(board, today):
    """Same snapshot and state reuse the result; a new snapshot recomputes."""
    engine = ViewEngine()
    snapshot = tuple(board)
    state = ViewState(calendar_cursor=today)

    first = engine.project(snapshot, state, today)
    assert engine.project(snapshot, state, today) is first

    changed = engine.project(tuple(board), state, today)
    assert changed is not first
    assert changed == first

    assert engine.project(snapshot, state.with_query("gym"), today) is not first
