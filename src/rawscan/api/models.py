"""Pydantic models for the remote product and profile calls."""

from pydantic import BaseModel, ConfigDict, Field

from rawscan.domain.profiles import UserProfile


class UserProfilePayload(BaseModel):
    """User profile payload."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    body_goal: str | None = Field(default=None, alias="bodyGoal")
    health_goals: list[str] = Field(default_factory=list, alias="healthGoals")
    diet_goals: list[str] = Field(default_factory=list, alias="dietGoals")
    lifestyle_goals: list[str] = Field(default_factory=list, alias="lifestyleGoals")

    def to_domain(self, user_id: str | None = None) -> UserProfile:
        """Convert to the domain profile, preferring an explicit user id."""
        return UserProfile(
            user_id=user_id or self.user_id,
            body_goal=self.body_goal,
            health_goals=frozenset(self.health_goals),
            diet_goals=frozenset(self.diet_goals),
            lifestyle_goals=frozenset(self.lifestyle_goals),
        )


class ProductGetRequest(BaseModel):
    """Body of a ``product.get`` call."""

    model_config = ConfigDict(populate_by_name=True)

    barcode: str
    user_profile: UserProfilePayload | None = Field(default=None, alias="userProfile")
    user_id: str | None = Field(default=None, alias="userId")


class ProductSearchRequest(BaseModel):
    """Body of a ``product.search`` call."""

    query: str
    limit: int = 10


class ProfileUpsertRequest(BaseModel):
    """Body of a profile upsert call."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    profile: UserProfilePayload
