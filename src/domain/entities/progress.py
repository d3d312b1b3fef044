"""Progress and insight value objects for the dashboard."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

# Maximum allocatable hours per day across all categories.
DAILY_HOUR_CAP = 7


class Period(StrEnum):
    """Dashboard aggregation windows."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def days(self) -> int:
        return {Period.DAILY: 1, Period.WEEKLY: 7, Period.MONTHLY: 30}[self]


@dataclass(frozen=True, slots=True)
class CategoryProgress:
    category_id: UUID
    name: str
    color: str
    icon: str | None
    goal_hours: float
    current_hours: float
    progress_percent: int


@dataclass(frozen=True, slots=True)
class ProgressTotal:
    goal_hours: float
    current_hours: float
    capacity_hours: float
    progress_percent: int
    over_capacity: bool


@dataclass(frozen=True, slots=True)
class ProgressReport:
    period: Period
    categories: list[CategoryProgress]
    total: ProgressTotal


@dataclass(frozen=True, slots=True)
class CategoryInsight:
    category_id: UUID
    category_name: str
    insight: str
    recommendations: list[str] = field(default_factory=list)
    entry_count: int = 0
    average_minutes: float | None = None
    days_since_last_entry: int | None = None
