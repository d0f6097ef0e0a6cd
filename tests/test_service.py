"""
Test service layer: editing rules, lookups, next steps, import/export.
"""

# Path setup handled by conftest.py
import json

import pytest

from pcrm.core import service, repository
from pcrm.core.exceptions import (
    TaskNotFoundError,
    NextStepNotFoundError,
    InvalidInputError,
    ParseFailure,
)
from pcrm.core.store import TaskStore
from conftest import make_task


@pytest.fixture
def store():
    """Empty store with no persistence."""
    return TaskStore()


def test_create_task_trims_and_defaults(store):
    """Title/description are trimmed; defaults are Dealership/Active."""
    task = service.create_task(store, "  Call Mike  ", description="  about trade-in ")

    assert task.title == "Call Mike"
    assert task.description == "about trade-in"
    assert task.category == "Dealership"
    assert task.status == "Active"
    assert task.created_at
    assert store.tasks[0] == task


def test_create_task_rejects_empty_title(store):
    """Whitespace-only titles are invalid and nothing is stored."""
    with pytest.raises(InvalidInputError):
        service.create_task(store, "   ")
    assert len(store) == 0


def test_create_task_validates_fields(store):
    """Bad category, status or due date are rejected."""
    with pytest.raises(InvalidInputError):
        service.create_task(store, "X", category="Hobby")
    with pytest.raises(InvalidInputError):
        service.create_task(store, "X", status="Blocked")
    with pytest.raises(InvalidInputError):
        service.create_task(store, "X", due_date="06/01/2024")


def test_empty_due_date_means_none(store):
    """An empty due date input is 'no due date'."""
    task = service.create_task(store, "X", due_date="")
    assert task.due_date is None


def test_update_task_changes_only_given_fields(store):
    """Unspecified fields, id and createdAt are kept."""
    original = service.create_task(store, "Call Mike", due_date="2024-06-03")
    updated = service.update_task(store, original.id, status="Pending")

    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert updated.title == "Call Mike"
    assert updated.due_date == "2024-06-03"
    assert updated.status == "Pending"

    cleared = service.update_task(store, original.id, due_date=None)
    assert cleared.due_date is None


def test_update_keeps_list_position(store):
    """Edits replace the task in place."""
    a = service.create_task(store, "A")
    service.create_task(store, "B")
    service.update_task(store, a.id, title="A2")
    assert [t.title for t in store.tasks] == ["B", "A2"]


def test_find_task_by_prefix():
    """Unique prefixes resolve; ambiguous ones are errors."""
    store = TaskStore([make_task("abc123"), make_task("abd456")])

    assert service.find_task(store, "abc").id == "abc123"
    assert service.find_task(store, "abd456").id == "abd456"
    with pytest.raises(InvalidInputError):
        service.find_task(store, "ab")
    with pytest.raises(TaskNotFoundError):
        service.find_task(store, "zzz")
    with pytest.raises(InvalidInputError):
        service.find_task(store, "  ")


def test_delete_task(store):
    """Delete removes the task; unknown ids raise and change nothing."""
    a = service.create_task(store, "A")
    b = service.create_task(store, "B")

    assert service.delete_task(store, a.id) == a
    assert [t.id for t in store.tasks] == [b.id]

    with pytest.raises(TaskNotFoundError):
        service.delete_task(store, "does-not-exist")
    assert [t.id for t in store.tasks] == [b.id]


def test_toggle_complete_goes_back_to_active(store):
    """Active -> Completed -> Active, never back to Pending."""
    task = service.create_task(store, "A", status="Pending")

    assert service.toggle_complete(store, task.id).status == "Completed"
    assert service.toggle_complete(store, task.id).status == "Active"


def test_next_step_lifecycle(store):
    """Add, find by number/prefix, toggle and remove next steps."""
    task = service.create_task(store, "Call Mike")
    task = service.add_next_step(store, task.id, "  Send numbers ", "2024-06-02")
    task = service.add_next_step(store, task.id, "Follow up")

    assert [s.text for s in task.next_steps] == ["Send numbers", "Follow up"]
    assert task.next_steps[0].due_date == "2024-06-02"
    assert task.next_steps[1].due_date is None

    second = service.find_next_step(task, "2")
    assert second.text == "Follow up"
    assert service.find_next_step(task, second.id[:10]) == second

    task = service.toggle_next_step_done(store, task.id, "1")
    assert task.next_steps[0].done is True
    task = service.toggle_next_step_done(store, task.id, "1")
    assert task.next_steps[0].done is False

    task = service.remove_next_step(store, task.id, "1")
    assert [s.text for s in task.next_steps] == ["Follow up"]


def test_next_step_errors(store):
    """Empty text and unknown steps are rejected."""
    task = service.create_task(store, "A")
    with pytest.raises(InvalidInputError):
        service.add_next_step(store, task.id, "  ")
    with pytest.raises(NextStepNotFoundError):
        service.remove_next_step(store, task.id, "1")


def test_deleting_task_removes_its_steps(store):
    """Next steps belong to their task and go with it."""
    task = service.create_task(store, "A")
    service.add_next_step(store, task.id, "Step")
    service.delete_task(store, task.id)
    assert len(store) == 0


def test_name_resolution():
    """Names are case-insensitive and accept unique prefixes."""
    assert service.resolve_category("fam") == "Family"
    assert service.resolve_category("PERSONAL") == "Personal"
    assert service.resolve_status("pend") == "Pending"
    assert service.resolve_status("all", allow_all=True) == "All"
    assert service.resolve_sort_key("due") == "dueDate"
    assert service.resolve_sort_key("created_at") == "createdAt"
    assert service.resolve_view("cal") == "calendar"
    assert service.resolve_calendar_mode("W") == "week"

    with pytest.raises(InvalidInputError):
        service.resolve_status("all")
    with pytest.raises(InvalidInputError):
        service.resolve_category("")


def test_open_store_persists_seed():
    """First open writes the seed so ids stay stable across runs."""
    first = service.open_store()
    second = service.open_store()

    assert len(first) == 5
    assert [t.id for t in first.tasks] == [t.id for t in second.tasks]


def test_open_store_writes_through():
    """Mutations through the store reach the database."""
    store = service.open_store()
    task = service.create_task(store, "Persist me")

    reloaded = service.open_store()
    assert reloaded.get(task.id) == task


def test_import_replaces_everything(tmp_path, store):
    """A valid import file replaces the list wholesale."""
    service.create_task(store, "Old")
    path = tmp_path / "in.json"
    path.write_text(json.dumps([make_task("n1").to_dict(), make_task("n2").to_dict()]), encoding="utf-8")

    assert service.import_tasks(store, path) == 2
    assert [t.id for t in store.tasks] == ["n1", "n2"]


def test_bad_import_leaves_store_unchanged(tmp_path, store):
    """Malformed JSON raises ParseFailure and keeps the previous list."""
    service.create_task(store, "Keep me")
    before = store.tasks
    path = tmp_path / "bad.json"
    path.write_text("{oops", encoding="utf-8")

    with pytest.raises(ParseFailure):
        service.import_tasks(store, path)
    assert store.tasks is before


def test_export_uses_store_contents(tmp_path):
    """Export writes the store's tasks."""
    store = TaskStore([make_task("a"), make_task("b")])
    path = service.export_tasks(store, tmp_path)
    assert [t["id"] for t in json.loads(path.read_text(encoding="utf-8"))] == ["a", "b"]
    assert repository.read_record("personal_crm_tasks_v1") is None
