"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from rawscan.domain.profiles import UserProfile
from rawscan.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase-backed profile repository."""

    client: Client

    def get(self, user_id: str) -> UserProfile | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("user_id, body_goal, health_goals, diet_goals, lifestyle_goals")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile(
            user_id=str(row["user_id"]),
            body_goal=row.get("body_goal"),
            health_goals=frozenset(row.get("health_goals") or []),
            diet_goals=frozenset(row.get("diet_goals") or []),
            lifestyle_goals=frozenset(row.get("lifestyle_goals") or []),
        )

    def upsert(self, profile: UserProfile) -> None:
        """Create or replace the profile row for a user."""
        self.client.table("profiles").upsert(
            {
                "user_id": profile.user_id,
                "body_goal": profile.body_goal,
                "health_goals": sorted(profile.health_goals),
                "diet_goals": sorted(profile.diet_goals),
                "lifestyle_goals": sorted(profile.lifestyle_goals),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
