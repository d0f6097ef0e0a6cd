"""
FILE: pcrm/core/models.py
PURPOSE: Domain models for tasks and their next steps
EXPORTS:
  - NextStep (frozen dataclass)
  - Task (frozen dataclass)
  - new_id() -> str
  - now_iso() -> str
DEPENDENCIES:
  - dataclasses (stdlib)
  - json (stdlib)
  - uuid (stdlib)
  - typing (stdlib)
NOTES:
  - Models are immutable; edits produce a new object (dataclasses.replace)
  - All models have from_dict() for JSON record conversion
  - All models have to_dict()/to_json() for serialization
  - JSON keys are camelCase (dueDate, createdAt, nextSteps)
  - Optional fields use None as default and are omitted from JSON
  - Dates stored as ISO-8601 strings
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
import json
import uuid

from .constants import DEFAULT_CATEGORY, DEFAULT_STATUS


def new_id() -> str:
    """Generate an opaque, collision-resistant id (128-bit random hex)."""
    return uuid.uuid4().hex


def now_iso() -> str:
    """Current local timestamp as an ISO-8601 string."""
    return datetime.now().isoformat()


def _optional_str(value: Any, keep_empty: bool = False) -> Optional[str]:
    # JSON null/absent -> None; "" -> None unless keep_empty
    if value is None:
        return None
    if value == "" and not keep_empty:
        return None
    return str(value)


@dataclass(frozen=True)
class NextStep:
    """An actionable follow-up nested inside a task."""

    id: str
    text: str
    due_date: Optional[str] = None
    done: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NextStep":
        """Convert a JSON object to a NextStep."""
        if not isinstance(data, dict):
            raise TypeError(f"next step must be an object, got {type(data).__name__}")
        return cls(
            id=str(data.get("id") or new_id()),
            text=str(data.get("text") or ""),
            due_date=_optional_str(data.get("dueDate")),
            done=data.get("done"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict (absent fields omitted)."""
        data: Dict[str, Any] = {"id": self.id, "text": self.text}
        if self.due_date is not None:
            data["dueDate"] = self.due_date
        if self.done is not None:
            data["done"] = self.done
        return data


@dataclass(frozen=True)
class Task:
    """A trackable unit of work with category, status, due date and next steps."""

    id: str
    title: str
    category: str = DEFAULT_CATEGORY
    status: str = DEFAULT_STATUS
    created_at: str = ""
    description: Optional[str] = None
    due_date: Optional[str] = None
    next_steps: Tuple[NextStep, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """
        Convert a JSON object to a Task.

        Missing fields fall back to defaults; values are not validated
        against the category/status sets (imports are taken as-is).

        Raises:
            TypeError: If data (or a next step) is not a JSON object
        """
        if not isinstance(data, dict):
            raise TypeError(f"task must be an object, got {type(data).__name__}")
        steps = data.get("nextSteps") or []
        if not isinstance(steps, list):
            raise TypeError("nextSteps must be an array")
        return cls(
            id=str(data.get("id") or new_id()),
            title=str(data.get("title") or ""),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            status=str(data.get("status") or DEFAULT_STATUS),
            created_at=str(data.get("createdAt") or ""),
            description=_optional_str(data.get("description"), keep_empty=True),
            due_date=_optional_str(data.get("dueDate")),
            next_steps=tuple(NextStep.from_dict(s) for s in steps),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict in the persisted field order."""
        data: Dict[str, Any] = {"id": self.id, "title": self.title}
        if self.description is not None:
            data["description"] = self.description
        data["category"] = self.category
        data["status"] = self.status
        if self.due_date is not None:
            data["dueDate"] = self.due_date
        data["createdAt"] = self.created_at
        data["nextSteps"] = [step.to_dict() for step in self.next_steps]
        return data

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @property
    def short_id(self) -> str:
        """First eight characters of the id, for display."""
        return self.id[:8]
