"""Rule catalog models."""

from dataclasses import dataclass
from enum import StrEnum


class RuleType(StrEnum):
    """Kinds of evidence a rule can inspect."""

    INGREDIENT_PATTERN = "ingredient-pattern"
    NUTRIENT_THRESHOLD = "nutrient-threshold"
    ADDITIVE_FLAG = "additive-flag"


@dataclass(frozen=True)
class RuleDefinition:
    """A weighted rule from the rules catalog."""

    id: str
    type: RuleType
    target: str
    pattern: str
    weight: float
    category: str
    notes: str = ""

    def to_dict(self) -> dict[str, object]:
        """Serialize for admin views and catalog hashing."""
        return {
            "id": self.id,
            "type": str(self.type),
            "target": self.target,
            "pattern": self.pattern,
            "weight": self.weight,
            "category": self.category,
            "notes": self.notes,
        }
