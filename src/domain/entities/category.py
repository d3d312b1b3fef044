"""Wellness category domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

DEFAULT_COLOR = "#3B82F6"


def normalize_color(color: str) -> str:
    """Ensure a hex color starts with # and is uppercase."""
    if not color.startswith("#"):
        color = f"#{color}"
    return color.upper()


@dataclass
class WellnessCategory:
    """A grouping (e.g. "Work") that entries and goals are tracked against.

    ``user_id`` is None for the system defaults shared by every user.
    """

    name: str
    user_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    color: str = DEFAULT_COLOR
    icon: str | None = None
    description: str | None = None
    display_order: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.color = normalize_color(self.color)

    @property
    def is_system_default(self) -> bool:
        return self.user_id is None

    def is_visible_to(self, user_id: UUID) -> bool:
        return self.user_id is None or self.user_id == user_id
