"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Profile:
    """Domain entity for a user profile (one per Supabase auth user)."""

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    display_name: str | None = None
    avatar_url: str | None = None
    phone: str | None = None
    email_verified: bool = False
    phone_verified: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @staticmethod
    def default_display_name(email: str) -> str:
        """Local part of the email address, used until the user picks a name."""
        return email.split("@", 1)[0]


@dataclass(frozen=True, slots=True)
class VerificationStatus:
    """Read-only view of a profile's verification flags."""

    email: str
    email_verified: bool
    phone: str | None
    phone_verified: bool

    @property
    def fully_verified(self) -> bool:
        return self.email_verified and (self.phone is None or self.phone_verified)
