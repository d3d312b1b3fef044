"""Category goal domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

MIN_GOAL_HOURS = 0.0
MAX_GOAL_HOURS = 168.0  # hours in a week


@dataclass
class CategoryGoal:
    """Weekly target hours for one category. One per (user, category)."""

    user_id: UUID
    category_id: UUID
    goal_hours: float
    id: UUID = field(default_factory=uuid4)
    notes: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def goal_minutes(self) -> float:
        return self.goal_hours * 60
