"""
Test Task/NextStep JSON conversion.
"""

# Path setup handled by conftest.py
import json

import pytest

from pcrm.core.models import Task, NextStep, new_id


def test_to_dict_omits_absent_fields():
    """Optional fields are left out of the JSON object when absent."""
    task = Task(id="t1", title="Call Mike", created_at="2024-06-01T09:00:00")
    data = task.to_dict()

    assert data == {
        "id": "t1",
        "title": "Call Mike",
        "category": "Dealership",
        "status": "Active",
        "createdAt": "2024-06-01T09:00:00",
        "nextSteps": [],
    }
    assert list(data) == ["id", "title", "category", "status", "createdAt", "nextSteps"]


def test_from_dict_round_trip_preserves_everything():
    """A full record survives from_dict/to_dict unchanged."""
    record = {
        "id": "abc",
        "title": "Date night plan",
        "description": "Book dinner",
        "category": "Family",
        "status": "Pending",
        "dueDate": "2024-06-05",
        "createdAt": "2024-06-01T10:00:00.000Z",
        "nextSteps": [
            {"id": "s1", "text": "Check babysitter", "dueDate": "2024-06-03"},
            {"id": "s2", "text": "Book table", "done": True},
        ],
    }
    assert Task.from_dict(record).to_dict() == record


def test_from_dict_fills_defaults():
    """Missing fields get defaults; missing ids get fresh ones."""
    task = Task.from_dict({"title": "Bare"})

    assert task.title == "Bare"
    assert task.category == "Dealership"
    assert task.status == "Active"
    assert task.due_date is None
    assert task.description is None
    assert task.next_steps == ()
    assert len(task.id) == 32


def test_from_dict_keeps_unknown_category():
    """Imported values are taken as-is, not validated."""
    task = Task.from_dict({"id": "x", "title": "Odd", "category": "Hobby"})
    assert task.category == "Hobby"


def test_from_dict_rejects_non_objects():
    """Non-object tasks or steps raise TypeError."""
    with pytest.raises(TypeError):
        Task.from_dict(["not", "a", "task"])
    with pytest.raises(TypeError):
        Task.from_dict({"id": "x", "nextSteps": "soon"})
    with pytest.raises(TypeError):
        NextStep.from_dict("call")


def test_to_json_is_valid_json():
    """to_json output parses back to the same dict."""
    task = Task(id="t1", title="Gym – upper body", next_steps=(NextStep(id="s", text="Pack bag"),))
    assert json.loads(task.to_json()) == task.to_dict()


def test_models_are_immutable():
    """Tasks cannot be mutated in place."""
    task = Task(id="t1", title="Fixed")
    with pytest.raises(AttributeError):
        task.title = "Changed"


def test_new_id_is_unique_hex():
    """Ids are 128-bit hex tokens."""
    ids = {new_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(len(i) == 32 and int(i, 16) >= 0 for i in ids)
