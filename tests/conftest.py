"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from datetime import date
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pcrm.core import repository
from pcrm.core.models import Task, NextStep


@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    """Use temporary database (and data dir) for all tests."""
    db_path = tmp_path / "test_pcrm.db"
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DB_DIR", tmp_path)
    monkeypatch.setenv("PCRM_HOME", str(tmp_path))
    monkeypatch.delenv("PCRM_SEED", raising=False)
    monkeypatch.delenv("PCRM_DUE_SOON_DAYS", raising=False)
    yield db_path


@pytest.fixture
def today():
    """Fixed reference date (a Saturday) so date math is deterministic."""
    return date(2024, 6, 1)


def make_task(task_id, title=None, category="Dealership", status="Active",
              due_date=None, created_at="2024-05-01T09:00:00", description=None,
              next_steps=()):
    """Build a Task with sensible defaults for tests."""
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        category=category,
        status=status,
        created_at=created_at,
        description=description,
        due_date=due_date,
        next_steps=tuple(next_steps),
    )


def make_step(step_id, text=None, due_date=None, done=None):
    """Build a NextStep for tests."""
    return NextStep(id=step_id, text=text or f"Step {step_id}", due_date=due_date, done=done)
