"""Wellness entry domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

MAX_ENTRY_MINUTES = 24 * 60


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Timestamps are stored as naive UTC. Offset-aware values are converted."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass
class WellnessEntry:
    """A single recorded activity: ``duration`` minutes in a category."""

    user_id: UUID
    category_id: UUID
    duration: int
    id: UUID = field(default_factory=uuid4)
    notes: str | None = None
    logged_at: datetime = field(default_factory=datetime.utcnow)
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def hours(self) -> float:
        return self.duration / 60


@dataclass(frozen=True, slots=True)
class EntryStats:
    """Aggregated minutes for a user over a date range."""

    total_minutes: int
    entry_count: int
    minutes_by_category: dict[UUID, int]

    @property
    def total_hours(self) -> float:
        return round(self.total_minutes / 60, 2)
