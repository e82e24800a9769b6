"""User profile models."""

import hashlib
import json
from dataclasses import dataclass


@dataclass(frozen=True)
class UserProfile:
    """Goals a user has declared. Read-only input to personalization."""

    user_id: str | None = None
    body_goal: str | None = None
    health_goals: frozenset[str] = frozenset()
    diet_goals: frozenset[str] = frozenset()
    lifestyle_goals: frozenset[str] = frozenset()

    def goals(self) -> list[str]:
        """Return every declared goal in a stable order."""
        ordered: list[str] = []
        if self.body_goal:
            ordered.append(self.body_goal)
        for group in (self.health_goals, self.diet_goals, self.lifestyle_goals):
            ordered.extend(sorted(group))
        return ordered

    def fingerprint(self) -> str:
        """Return a stable digest of the goals, ignoring the user reference."""
        payload = json.dumps(
            {
                "body_goal": self.body_goal,
                "health_goals": sorted(self.health_goals),
                "diet_goals": sorted(self.diet_goals),
                "lifestyle_goals": sorted(self.lifestyle_goals),
            },
            sort_keys=True,
        )
        return hashlib.sha256(payload.encode()).hexdigest()[:16]
