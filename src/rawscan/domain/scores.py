"""Score domain models."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ExplanationEntry:
    """A matched rule and what it contributed."""

    rule_id: str
    category: str
    contribution: float
    rationale: str

    def with_contribution(self, contribution: float) -> "ExplanationEntry":
        """Return a copy with a different contribution."""
        return replace(self, contribution=contribution)

    def to_dict(self) -> dict[str, object]:
        """Serialize using the stored explanation keys."""
        return {
            "rule": self.rule_id,
            "category": self.category,
            "contribution": self.contribution,
            "rationale": self.rationale,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> "ExplanationEntry":
        """Build from a stored explanation entry."""
        return cls(
            rule_id=str(raw.get("rule", "")),
            category=str(raw.get("category", "")),
            contribution=float(raw.get("contribution", 0.0)),
            rationale=str(raw.get("rationale", "")),
        )


@dataclass(frozen=True)
class Swap:
    """A healthier alternative in the same category."""

    barcode: str
    name: str
    score: float

    def to_dict(self) -> dict[str, object]:
        """Serialize for API responses and stored records."""
        return {"barcode": self.barcode, "name": self.name, "score": self.score}

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> "Swap":
        """Build from a stored swap entry."""
        return cls(
            barcode=str(raw.get("barcode", "")),
            name=str(raw.get("name", "")),
            score=float(raw.get("score", 0.0)),
        )


@dataclass(frozen=True)
class RulesOutcome:
    """Context-free score for a product."""

    score: float
    explanation: list[ExplanationEntry]
    raw_total: float


@dataclass(frozen=True)
class PersonalizedOutcome:
    """Score adjusted for a user's goals."""

    score: float
    explanation: list[ExplanationEntry]
    multipliers: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ScoreRecord:
    """Persisted score for an item, optionally tied to a user."""

    item_id: UUID
    user_id: str | None
    rules_score: float
    personalized_score: float
    explanation: list[ExplanationEntry]
    swaps: list[Swap]
    details: dict[str, object]
    created_at: datetime
    id: UUID | None = None
