"""
FILE: pcrm/core/seed.py
PURPOSE: Example tasks used on first run
EXPORTS:
  - seed_tasks(today) -> List[Task]
DEPENDENCIES:
  - datetime (stdlib)
  - pcrm.core.models (Task, NextStep)
NOTES:
  - One task per category, due dates relative to `today`
  - Fresh ids on every call
"""

from datetime import date, timedelta
from typing import List, Optional

from .constants import (
    CATEGORY_DEALERSHIP,
    CATEGORY_FAMILY,
    CATEGORY_BUSINESS,
    CATEGORY_SPIRITUAL,
    CATEGORY_PERSONAL,
    STATUS_ACTIVE,
    STATUS_PENDING,
)
from .models import Task, NextStep, new_id, now_iso


def seed_tasks(today: Optional[date] = None) -> List[Task]:
    """Build the five example tasks shown on first run."""
    today = today or date.today()
    created = now_iso()

    def in_days(n: int) -> str:
        return (today + timedelta(days=n)).isoformat()

    return [
        Task(
            id=new_id(),
            title="Follow up with BMW lead pipeline",
            description="Prepare proposals and call top 5 prospects",
            category=CATEGORY_DEALERSHIP,
            status=STATUS_ACTIVE,
            due_date=in_days(1),
            created_at=created,
            next_steps=(
                NextStep(id=new_id(), text="Call Grace re: X3 allocation", due_date=in_days(0)),
            ),
        ),
        Task(
            id=new_id(),
            title="Date night plan",
            description="Book dinner for Friday",
            category=CATEGORY_FAMILY,
            status=STATUS_PENDING,
            due_date=in_days(4),
            created_at=created,
            next_steps=(
                NextStep(id=new_id(), text="Check babysitter availability", due_date=in_days(2)),
            ),
        ),
        Task(
            id=new_id(),
            title="MG Capital deck tweaks",
            description="Refine use-of-funds and roadmap",
            category=CATEGORY_BUSINESS,
            status=STATUS_ACTIVE,
            due_date=in_days(2),
            created_at=created,
            next_steps=(
                NextStep(id=new_id(), text="Add NDA step into next steps", due_date=in_days(2)),
            ),
        ),
        Task(
            id=new_id(),
            title="Morning prayer & study",
            description="Matthew 6 + journaling",
            category=CATEGORY_SPIRITUAL,
            status=STATUS_ACTIVE,
            created_at=created,
            next_steps=(NextStep(id=new_id(), text="Set 5:15am alarm"),),
        ),
        Task(
            id=new_id(),
            title="Gym – upper body",
            description="50-minute workout (YMCA)",
            category=CATEGORY_PERSONAL,
            status=STATUS_PENDING,
            due_date=in_days(6),
            created_at=created,
            next_steps=(
                NextStep(id=new_id(), text="Pack gym bag tonight", due_date=in_days(5)),
            ),
        ),
    ]
