"""
FILE: pcrm/core/store.py
PURPOSE: Authoritative in-memory task list and its mutations
EXPORTS:
  - TaskStore (class)
DEPENDENCIES:
  - pcrm.core.models (Task)
  - pcrm.core.exceptions (PersistenceError)
NOTES:
  - The task list is an immutable tuple; every mutation swaps in a new one,
    so snapshot identity changes exactly when the contents do
  - Every mutation writes the full list through the `persist` callback
  - Unknown ids are no-ops, not errors
  - A failed write is logged and kept on `last_write_error`, never raised
"""

import dataclasses
import logging
from typing import Callable, Iterable, Optional, Tuple

from .constants import STATUS_ACTIVE, STATUS_COMPLETED
from .exceptions import PersistenceError
from .models import Task

logger = logging.getLogger(__name__)

PersistFn = Callable[[Tuple[Task, ...]], None]


class TaskStore:
    """In-memory task list with write-through persistence."""

    def __init__(self, tasks: Iterable[Task] = (), persist: Optional[PersistFn] = None):
        self._tasks: Tuple[Task, ...] = tuple(tasks)
        self._persist = persist
        self.last_write_error: Optional[PersistenceError] = None

    @property
    def tasks(self) -> Tuple[Task, ...]:
        """Current snapshot, in store order."""
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        """Return the task with this id, or None."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # --- Mutations ---

    def upsert(self, task: Task) -> Task:
        """
        Insert or replace a task.

        Existing id: replaced in place (list position preserved).
        New id: prepended to the front of the list.
        """
        if any(t.id == task.id for t in self._tasks):
            self._commit(tuple(task if t.id == task.id else t for t in self._tasks))
            logger.debug("Updated task %s", task.id)
        else:
            self._commit((task,) + self._tasks)
            logger.debug("Added task %s", task.id)
        return task

    def remove(self, task_id: str) -> bool:
        """
        Remove a task (and with it all its next steps).

        Returns:
            True if a task was removed, False if the id was unknown
        """
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            return False
        self._commit(remaining)
        logger.debug("Removed task %s", task_id)
        return True

    def toggle_complete(self, task_id: str) -> Optional[Task]:
        """
        Flip a task between Completed and Active.

        Any non-Completed status (Active or Pending) becomes Completed;
        Completed always goes back to Active.

        Returns:
            The replacement task, or None if the id was unknown
        """
        task = self.get(task_id)
        if task is None:
            return None
        new_status = STATUS_ACTIVE if task.status == STATUS_COMPLETED else STATUS_COMPLETED
        return self.upsert(dataclasses.replace(task, status=new_status))

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Overwrite the whole list (used by import)."""
        self._commit(tuple(tasks))
        logger.info("Replaced task list (%d task(s))", len(self._tasks))

    def save(self) -> None:
        """Write the current snapshot without changing it."""
        self._write()

    # --- Internals ---

    def _commit(self, tasks: Tuple[Task, ...]) -> None:
        self._tasks = tasks
        self._write()

    def _write(self) -> None:
        if self._persist is None:
            return
        try:
            self._persist(self._tasks)
            self.last_write_error = None
        except PersistenceError as e:
            logger.warning("Task list not saved: %s", e)
            self.last_write_error = e
