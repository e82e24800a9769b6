"""Goal-driven adjustment of rule contributions."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from rawscan.domain.profiles import UserProfile
from rawscan.domain.scores import ExplanationEntry, PersonalizedOutcome
from rawscan.services.rules import normalize_score

_logger = logging.getLogger(__name__)

# goal -> {rule category: multiplier}. Multipliers from several goals compound.
GOAL_MULTIPLIERS: Mapping[str, Mapping[str, float]] = {
    # Body goals
    "lose_weight": {
        "sweeteners": 1.5,
        "refined_carbs": 1.5,
        "saturated_fat": 1.5,
        "energy_density": 1.5,
        "fiber": 1.25,
        "protein": 1.25,
    },
    "gain_weight": {
        "protein": 1.3,
        "whole_foods": 1.3,
        "healthy_fats": 1.2,
    },
    "maintain_weight": {},
    # Health goals
    "low_sugar": {
        "sweeteners": 2.0,
        "artificial_sweeteners": 1.5,
    },
    "low_sodium": {
        "sodium": 2.0,
    },
    "high_protein": {
        "protein": 1.5,
    },
    "low_fat": {
        "saturated_fat": 1.5,
        "trans_fat": 1.5,
    },
    "keto": {
        "refined_carbs": 2.0,
        "sweeteners": 2.0,
        "healthy_fats": 1.2,
    },
    "heart_health": {
        "sodium": 1.5,
        "trans_fat": 2.0,
        "saturated_fat": 1.5,
        "healthy_fats": 1.3,
    },
    "gut_health": {
        "fiber": 1.5,
        "probiotics": 1.5,
    },
    "balanced": {},
    # Diet goals
    "whole_foods": {
        "whole_foods": 1.4,
        "preservatives": 1.3,
        "colors": 1.3,
        "seed_oils": 1.3,
    },
    "vegan": {
        "meat": 3.0,
    },
    "vegetarian": {
        "meat": 3.0,
    },
    "carnivore": {
        "protein": 1.2,
        "refined_carbs": 1.3,
    },
    "gluten_free": {
        "gluten": 4.0,
        "refined_carbs": 1.2,
    },
    # Lifestyle goals
    "eat_and_live_healthier": {
        "whole_foods": 1.2,
        "preservatives": 1.2,
    },
    "boost_energy_and_mood": {
        "sweeteners": 1.25,
        "fiber": 1.2,
    },
    "clear_up_my_skin": {
        "sweeteners": 1.3,
        "refined_carbs": 1.2,
    },
}


def normalize_goal(goal: str) -> str:
    """Canonical goal key: lower case, hyphens and spaces as underscores."""
    return goal.strip().lower().replace("-", "_").replace(" ", "_")


@dataclass(frozen=True)
class PersonalizationEngine:
    """Applies a fixed goal table to rule contributions."""

    table: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: GOAL_MULTIPLIERS
    )

    def multipliers(self, profile: UserProfile) -> dict[str, float]:
        """Return the compounded multiplier per rule category for a profile."""
        combined: dict[str, float] = {}
        for goal in profile.goals():
            key = normalize_goal(goal)
            adjustments = self.table.get(key)
            if adjustments is None:
                _logger.debug("No multipliers for goal %s", key)
                continue
            for category, multiplier in adjustments.items():
                combined[category] = combined.get(category, 1.0) * multiplier
        return combined

    def personalize(
        self,
        rules_score: float,
        explanation: list[ExplanationEntry],
        profile: UserProfile | None,
    ) -> PersonalizedOutcome:
        """Re-weight matched rules for a profile and re-normalize.

        Without a profile the rules score and explanation are returned as is.
        """
        if profile is None:
            return PersonalizedOutcome(score=rules_score, explanation=explanation)

        multipliers = self.multipliers(profile)
        adjusted = [
            entry.with_contribution(
                round(entry.contribution * multipliers.get(entry.category, 1.0), 4)
            )
            for entry in explanation
        ]
        raw_total = sum(entry.contribution for entry in adjusted)
        applied = {
            category: value
            for category, value in multipliers.items()
            if any(entry.category == category for entry in explanation)
        }
        return PersonalizedOutcome(
            score=normalize_score(raw_total),
            explanation=adjusted,
            multipliers=applied,
        )
