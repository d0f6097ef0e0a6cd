"""
Test the in-memory task store and its write-through persistence.
"""

# Path setup handled by conftest.py
import dataclasses

from pcrm.core.exceptions import PersistenceError
from pcrm.core.store import TaskStore
from conftest import make_task


class RecordingPersist:
    """Persist callback that remembers every snapshot it was given."""

    def __init__(self):
        self.calls = []

    def __call__(self, tasks):
        self.calls.append(tasks)


def test_upsert_prepends_new_tasks():
    """New tasks go to the front of the list."""
    store = TaskStore([make_task("a"), make_task("b")])
    store.upsert(make_task("c"))
    assert [t.id for t in store.tasks] == ["c", "a", "b"]


def test_upsert_replaces_in_place():
    """Editing keeps the task's position and changes only that task."""
    store = TaskStore([make_task("a"), make_task("b"), make_task("c")])
    edited = dataclasses.replace(store.get("b"), title="Renamed")
    store.upsert(edited)

    assert [t.id for t in store.tasks] == ["a", "b", "c"]
    assert store.get("b").title == "Renamed"
    assert len(store) == 3


def test_remove_removes_exactly_one():
    """Deleting removes exactly that task; unknown ids change nothing."""
    store = TaskStore([make_task("a"), make_task("b")])

    assert store.remove("a") is True
    assert [t.id for t in store.tasks] == ["b"]

    before = store.tasks
    assert store.remove("nope") is False
    assert store.tasks is before


def test_toggle_complete_round_trip():
    """Active -> Completed -> Active; Pending also completes."""
    store = TaskStore([make_task("a"), make_task("p", status="Pending")])

    assert store.toggle_complete("a").status == "Completed"
    assert store.toggle_complete("a").status == "Active"
    assert store.toggle_complete("p").status == "Completed"
    assert store.toggle_complete("p").status == "Active"
    assert store.toggle_complete("missing") is None


def test_every_mutation_persists_full_list():
    """Each change writes the whole list once."""
    persist = RecordingPersist()
    store = TaskStore([make_task("a")], persist=persist)

    store.upsert(make_task("b"))
    store.toggle_complete("a")
    store.remove("b")
    store.remove("unknown")  # no-op, no write

    assert len(persist.calls) == 3
    assert persist.calls[-1] == store.tasks


def test_snapshot_identity_changes_only_on_mutation():
    """Reading never swaps the snapshot; writing always does."""
    store = TaskStore([make_task("a")])
    first = store.tasks
    assert store.tasks is first

    store.upsert(make_task("b"))
    assert store.tasks is not first


def test_replace_all_overwrites():
    """Import replaces the whole list wholesale."""
    store = TaskStore([make_task("a"), make_task("b")])
    store.replace_all([make_task("z")])
    assert [t.id for t in store.tasks] == ["z"]


def test_write_failure_is_recorded_not_raised():
    """A failing write leaves the in-memory change and records the error."""
    def failing(tasks):
        raise PersistenceError("disk full")

    store = TaskStore([make_task("a")], persist=failing)
    store.upsert(make_task("b"))

    assert [t.id for t in store.tasks] == ["b", "a"]
    assert isinstance(store.last_write_error, PersistenceError)
