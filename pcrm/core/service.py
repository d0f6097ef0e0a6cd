"""
FILE: pcrm/core/service.py
PURPOSE: Business logic layer for task operations (the "edit form" rules)
EXPORTS:
  - open_store() -> TaskStore
  - new_task(...) -> Task
  - save_task(store, task) -> Task
  - create_task(store, title, ...) -> Task
  - update_task(store, ref, ...) -> Task
  - delete_task(store, ref) -> Task
  - toggle_complete(store, ref) -> Task
  - find_task(store, ref) -> Task
  - add_next_step(store, ref, text, due_date) -> Task
  - remove_next_step(store, ref, step_ref) -> Task
  - toggle_next_step_done(store, ref, step_ref) -> Task
  - find_next_step(task, step_ref) -> NextStep
  - import_tasks(store, path) -> int
  - export_tasks(store, destination, today) -> Path
  - resolve_category / resolve_status / resolve_sort_key /
    resolve_view / resolve_calendar_mode / parse_due_date
DEPENDENCIES:
  - pcrm.core.store (TaskStore)
  - pcrm.core.repository (load/save)
  - pcrm.core.transfer (export/import files)
  - pcrm.core.models (Task, NextStep)
  - pcrm.core.exceptions (TaskNotFoundError, NextStepNotFoundError, InvalidInputError)
NOTES:
  - All functions validate input and raise descriptive errors
  - No direct database access (use repository layer)
  - Tasks are replaced wholesale; "update" builds a full copy and upserts it
  - Ids can be given as any unique prefix (like git hashes)
  - User-facing names are matched case-insensitively
"""

import dataclasses
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from . import repository, transfer
from .constants import (
    CATEGORIES,
    STATUSES,
    STATUS_ALL,
    SORT_KEYS,
    SORT_DUE_DATE,
    SORT_CREATED_AT,
    SORT_CATEGORY,
    VIEWS,
    CALENDAR_MODES,
    DEFAULT_CATEGORY,
    DEFAULT_STATUS,
)
from .dates import parse_iso_date
from .exceptions import (
    TaskNotFoundError,
    NextStepNotFoundError,
    InvalidInputError,
)
from .models import Task, NextStep, new_id, now_iso
from .store import TaskStore

logger = logging.getLogger(__name__)

# Unset marker for update_task() (None means "clear the field")
_UNSET = object()

SORT_KEY_ALIASES = {
    "due": SORT_DUE_DATE,
    "duedate": SORT_DUE_DATE,
    "created": SORT_CREATED_AT,
    "createdat": SORT_CREATED_AT,
    "category": SORT_CATEGORY,
    "cat": SORT_CATEGORY,
}


# --- Store lifecycle ---


def open_store(today: Optional[date] = None) -> TaskStore:
    """
    Load the task list and return a store that writes back on every change.

    Notes:
        - Seed data is written immediately so its ids stay stable
          between runs
        - A corrupt stored record is logged by the repository and
          replaced by the seed data
    """
    result = repository.load_tasks(today)
    store = TaskStore(result.tasks, persist=repository.save_tasks)
    if result.source == repository.SOURCE_SEED:
        store.save()
    return store


# --- Name resolution ---


def _resolve(value: str, choices: Sequence[str], label: str) -> str:
    wanted = value.strip().casefold()
    for choice in choices:
        if choice.casefold() == wanted:
            return choice
    # Allow unambiguous prefixes ("fam" -> "Family")
    matches = [c for c in choices if c.casefold().startswith(wanted)] if wanted else []
    if len(matches) == 1:
        return matches[0]
    raise InvalidInputError(
        f"Invalid {label} '{value}'. Must be one of: {', '.join(choices)}"
    )


def resolve_category(value: str) -> str:
    return _resolve(value, CATEGORIES, "category")


def resolve_status(value: str, allow_all: bool = False) -> str:
    choices = STATUSES + ((STATUS_ALL,) if allow_all else ())
    return _resolve(value, choices, "status")


def resolve_sort_key(value: str) -> str:
    alias = SORT_KEY_ALIASES.get(value.strip().casefold().replace("_", "").replace("-", ""))
    if alias:
        return alias
    return _resolve(value, SORT_KEYS, "sort key")


def resolve_view(value: str) -> str:
    return _resolve(value, VIEWS, "view")


def resolve_calendar_mode(value: str) -> str:
    return _resolve(value, CALENDAR_MODES, "calendar mode")


def parse_due_date(value: Optional[str]) -> Optional[str]:
    """
    Normalize a user-supplied due date.

    Returns:
        ISO date string, or None for empty input

    Raises:
        InvalidInputError: If the value is not a YYYY-MM-DD date
    """
    if value is None or not value.strip():
        return None
    parsed = parse_iso_date(value)
    if parsed is None or len(value.strip()) != 10:
        raise InvalidInputError(f"Invalid date '{value}'. Use YYYY-MM-DD")
    return parsed.isoformat()


# --- Lookup ---


def find_task(store: TaskStore, ref: str) -> Task:
    """
    Find a task by full id or unique id prefix.

    Raises:
        TaskNotFoundError: If nothing matches
        InvalidInputError: If the prefix matches more than one task
    """
    ref = ref.strip()
    if not ref:
        raise InvalidInputError("Task id cannot be empty")

    exact = store.get(ref)
    if exact is not None:
        return exact

    matches = [t for t in store.tasks if t.id.startswith(ref)]
    if not matches:
        raise TaskNotFoundError(ref)
    if len(matches) > 1:
        raise InvalidInputError(
            f"Task id '{ref}' is ambiguous ({len(matches)} matches); use more characters"
        )
    return matches[0]


def find_next_step(task: Task, step_ref: str) -> NextStep:
    """
    Find a next step by id, id prefix, or 1-based position in the list.

    Raises:
        NextStepNotFoundError: If nothing (or more than one step) matches
    """
    step_ref = step_ref.strip()
    for step in task.next_steps:
        if step.id == step_ref:
            return step

    if step_ref.isdigit():
        index = int(step_ref) - 1
        if 0 <= index < len(task.next_steps):
            return task.next_steps[index]

    matches = [s for s in task.next_steps if step_ref and s.id.startswith(step_ref)]
    if len(matches) == 1:
        return matches[0]
    raise NextStepNotFoundError(task.id, step_ref)


# --- Task editing ---


def new_task(
    title: str = "",
    category: str = DEFAULT_CATEGORY,
    status: str = DEFAULT_STATUS,
    due_date: Optional[str] = None,
    description: Optional[str] = "",
) -> Task:
    """
    Build an unsaved task draft with a fresh id and creation timestamp.

    Nothing is stored until save_task() is called with the draft.
    """
    return Task(
        id=new_id(),
        title=title,
        category=category,
        status=status,
        created_at=now_iso(),
        description=description,
        due_date=due_date,
    )


def save_task(store: TaskStore, task: Task) -> Task:
    """
    Clean up a task the way the edit form does, then upsert it.

    Args:
        store: Target store
        task: Draft or edited copy of a task

    Returns:
        The task as stored

    Raises:
        InvalidInputError: Empty title, unknown category/status, bad due date

    Notes:
        - Trims title and description
        - Empty due date means "no due date"
        - New tasks go to the front of the list; edits keep their position
    """
    title = task.title.strip()
    if not title:
        raise InvalidInputError("Task title cannot be empty")
    if task.category not in CATEGORIES:
        raise InvalidInputError(
            f"Invalid category '{task.category}'. Must be one of: {', '.join(CATEGORIES)}"
        )
    if task.status not in STATUSES:
        raise InvalidInputError(
            f"Invalid status '{task.status}'. Must be one of: {', '.join(STATUSES)}"
        )

    clean = dataclasses.replace(
        task,
        title=title,
        description=(task.description or "").strip(),
        due_date=parse_due_date(task.due_date),
    )
    return store.upsert(clean)


def create_task(
    store: TaskStore,
    title: str,
    category: str = DEFAULT_CATEGORY,
    status: str = DEFAULT_STATUS,
    due_date: Optional[str] = None,
    description: Optional[str] = None,
    next_steps: Iterable[NextStep] = (),
) -> Task:
    """
    Create and store a new task.

    Raises:
        InvalidInputError: If title is empty or a field is invalid
    """
    draft = new_task(
        title=title,
        category=category,
        status=status,
        due_date=due_date,
        description=description,
    )
    draft = dataclasses.replace(draft, next_steps=tuple(next_steps))
    task = save_task(store, draft)
    logger.info("Created task %s", task.id)
    return task


def update_task(
    store: TaskStore,
    ref: str,
    title=_UNSET,
    category=_UNSET,
    status=_UNSET,
    due_date=_UNSET,
    description=_UNSET,
) -> Task:
    """
    Replace a task with an edited copy.

    Only the given fields change; pass due_date=None to clear the due date.
    id and created_at never change.

    Raises:
        TaskNotFoundError: If the task doesn't exist
        InvalidInputError: If an edited field is invalid
    """
    task = find_task(store, ref)
    changes = {}
    if title is not _UNSET:
        changes["title"] = title
    if category is not _UNSET:
        changes["category"] = category
    if status is not _UNSET:
        changes["status"] = status
    if due_date is not _UNSET:
        changes["due_date"] = due_date
    if description is not _UNSET:
        changes["description"] = description

    return save_task(store, dataclasses.replace(task, **changes))


def delete_task(store: TaskStore, ref: str) -> Task:
    """
    Delete a task and all its next steps.

    Returns:
        The deleted task

    Raises:
        TaskNotFoundError: If the task doesn't exist
    """
    task = find_task(store, ref)
    store.remove(task.id)
    logger.info("Deleted task %s", task.id)
    return task


def toggle_complete(store: TaskStore, ref: str) -> Task:
    """
    Flip a task between Completed and Active.

    Raises:
        TaskNotFoundError: If the task doesn't exist
    """
    task = find_task(store, ref)
    return store.toggle_complete(task.id)


# --- Next steps ---


def add_next_step(
    store: TaskStore,
    ref: str,
    text: str,
    due_date: Optional[str] = None,
) -> Task:
    """
    Append a next step to a task.

    Raises:
        TaskNotFoundError: If the task doesn't exist
        InvalidInputError: If text is empty or the date is invalid
    """
    task = find_task(store, ref)
    text = text.strip()
    if not text:
        raise InvalidInputError("Next step text cannot be empty")

    step = NextStep(id=new_id(), text=text, due_date=parse_due_date(due_date))
    return store.upsert(dataclasses.replace(task, next_steps=task.next_steps + (step,)))


def remove_next_step(store: TaskStore, ref: str, step_ref: str) -> Task:
    """
    Remove one next step from a task.

    Raises:
        TaskNotFoundError: If the task doesn't exist
        NextStepNotFoundError: If the step doesn't exist
    """
    task = find_task(store, ref)
    step = find_next_step(task, step_ref)
    remaining = tuple(s for s in task.next_steps if s.id != step.id)
    return store.upsert(dataclasses.replace(task, next_steps=remaining))


def toggle_next_step_done(store: TaskStore, ref: str, step_ref: str) -> Task:
    """
    Flip a next step's done flag.

    Raises:
        TaskNotFoundError: If the task doesn't exist
        NextStepNotFoundError: If the step doesn't exist
    """
    task = find_task(store, ref)
    step = find_next_step(task, step_ref)
    flipped = dataclasses.replace(step, done=not step.done)
    steps = tuple(flipped if s.id == step.id else s for s in task.next_steps)
    return store.upsert(dataclasses.replace(task, next_steps=steps))


# --- Import / Export ---


def export_tasks(
    store: TaskStore,
    destination: Union[str, Path, None] = None,
    today: Optional[date] = None,
) -> Path:
    """Write every task to a dated JSON file; returns the file path."""
    return transfer.export_tasks(store.tasks, destination, today)


def import_tasks(store: TaskStore, path: Union[str, Path]) -> int:
    """
    Replace the whole task list with the contents of a JSON file.

    Returns:
        Number of tasks imported

    Raises:
        ParseFailure: If the file is unreadable or not a task array
                      (the store is left unchanged)
    """
    tasks = transfer.read_import_file(path)
    store.replace_all(tasks)
    logger.info("Imported %d task(s) from %s", len(tasks), path)
    return len(tasks)
