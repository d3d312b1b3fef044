"""Profile service layer."""

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.cache import CacheTTL, QueryCache, query_cache, user_tag
from core.exceptions import ProfileNotFoundError
from domain.entities.profile import Profile, VerificationStatus
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ProfileService:
    """Service layer for user profiles."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: QueryCache = query_cache,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    async def get_profile(self, user_id: UUID) -> Profile:
        """Get the profile for an authenticated user."""

        async def load() -> Profile:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(user_id)
            if profile is None:
                raise ProfileNotFoundError(str(user_id))
            return profile

        return await self._cache.get_or_load(  # type: ignore[no-any-return]
            f"profile:{user_id}",
            load,
            ttl=CacheTTL.MEDIUM,
            tags=[user_tag("profile", user_id)],
        )

    async def ensure_profile(
        self,
        user_id: UUID,
        email: str,
        display_name: Optional[str] = None,
        email_verified: Optional[bool] = None,
    ) -> Profile:
        """Create the profile on first sign-in; sync auth-owned fields after.

        The profile ID always equals the auth user's ID.
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if profile is None:
                try:
                    profile = await uow.profiles.create(
                        Profile(
                            id=user_id,
                            email=email,
                            display_name=display_name or Profile.default_display_name(email),
                            email_verified=bool(email_verified),
                        )
                    )
                    await uow.commit()
                except IntegrityError as exc:
                    await uow.rollback()
                    # Only a concurrent insert of the same row is expected here.
                    orig = str(exc.orig).lower() if exc.orig else ""
                    if "unique" not in orig and "duplicate" not in orig:
                        raise
                    existing = await uow.profiles.get(user_id)
                    if existing is None:
                        raise
                    logger.debug("profile_already_created", user_id=str(user_id))
                    return existing
                logger.info("profile_created", user_id=str(user_id))
            else:
                changed = False
                if email and profile.email != email:
                    profile.email = email
                    changed = True
                if email_verified is not None and profile.email_verified != email_verified:
                    profile.email_verified = email_verified
                    changed = True
                if not changed:
                    return profile
                profile.updated_at = datetime.utcnow()
                profile = await uow.profiles.update(profile)
                await uow.commit()

        self._cache.invalidate(user_tag("profile", user_id))
        return profile

    async def update_profile(
        self,
        user_id: UUID,
        display_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Profile:
        """Apply settings-form changes. A new phone number must be re-verified."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if profile is None:
                raise ProfileNotFoundError(str(user_id))

            if display_name is not None:
                profile.display_name = display_name
            if avatar_url is not None:
                profile.avatar_url = avatar_url or None
            if phone is not None and phone != profile.phone:
                profile.phone = phone or None
                profile.phone_verified = False

            profile.updated_at = datetime.utcnow()
            updated = await uow.profiles.update(profile)
            await uow.commit()

        self._cache.invalidate_many(
            [user_tag("profile", user_id), user_tag("dashboard", user_id)]
        )
        return updated

    async def get_verification_status(self, user_id: UUID) -> VerificationStatus:
        profile = await self.get_profile(user_id)
        return VerificationStatus(
            email=profile.email,
            email_verified=profile.email_verified,
            phone=profile.phone,
            phone_verified=profile.phone_verified,
        )
