"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The authenticated user carried by an access token."""

    id: UUID
    email: str
    display_name: Optional[str] = None
    role: Optional[str] = None
    email_verified: bool = False


class IAuthProvider(Protocol):
    """Protocol for access token validation."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token.

        Args:
            token: The access token from a cookie or bearer header

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """Create a signed access token for a user."""
        ...
