"""User profile lookups and updates."""

import logging
from dataclasses import dataclass
from typing import Protocol

from rawscan.domain.profiles import UserProfile
from rawscan.errors import PersistenceError, ValidationError

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get(self, user_id: str) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def upsert(self, profile: UserProfile) -> None:
        """Create or replace a user's profile."""


@dataclass
class ProfileService:
    """Application service for profile reads and writes."""

    repository: ProfileRepository

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return a user's stored profile."""
        try:
            return self.repository.get(user_id)
        except Exception as exc:
            _logger.exception("Profile read failed", extra={"user_id": user_id})
            raise PersistenceError(f"Profile read failed: {exc}") from exc

    def upsert_profile(self, profile: UserProfile) -> None:
        """Store a profile. A profile without a user reference is rejected."""
        if not profile.user_id:
            raise ValidationError("A user id is required to save a profile")
        try:
            self.repository.upsert(profile)
        except Exception as exc:
            _logger.exception("Profile write failed", extra={"user_id": profile.user_id})
            raise PersistenceError(f"Profile write failed: {exc}") from exc
