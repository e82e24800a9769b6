"""Domain models for resolved products."""

import hashlib
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from uuid import UUID

NUTRIMENT_FIELDS = (
    "energy_kcal",
    "carbohydrates",
    "sugars",
    "fiber",
    "protein",
    "fat",
    "saturated_fat",
    "sodium",
    "salt",
)


@dataclass(frozen=True)
class Nutriments:
    """Nutrition facts per 100 g. Masses in grams, energy in kcal."""

    energy_kcal: float | None = None
    carbohydrates: float | None = None
    sugars: float | None = None
    fiber: float | None = None
    protein: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    sodium: float | None = None
    salt: float | None = None

    def value(self, name: str) -> float | None:
        """Return a nutriment by canonical field name."""
        if name not in NUTRIMENT_FIELDS:
            raise KeyError(name)
        return getattr(self, name)

    def is_empty(self) -> bool:
        """Return true when no nutriment is known."""
        return all(getattr(self, name) is None for name in NUTRIMENT_FIELDS)

    def to_dict(self) -> dict[str, float]:
        """Serialize known values only."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> "Nutriments":
        """Build from a serialized mapping, ignoring unknown keys."""
        values: dict[str, float] = {}
        for name in NUTRIMENT_FIELDS:
            amount = raw.get(name)
            if isinstance(amount, int | float):
                values[name] = float(amount)
        return cls(**values)


@dataclass(frozen=True)
class Product:
    """Canonical product record shared by every provider."""

    barcode: str
    name: str
    category: str
    ingredients: str
    source: str
    brand: str | None = None
    nutriments: Nutriments = field(default_factory=Nutriments)
    allergens: frozenset[str] = frozenset()
    additives: frozenset[str] = frozenset()

    def is_complete(self) -> bool:
        """Return true when the record carries enough data to be scored."""
        if not self.barcode or not self.name.strip():
            return False
        return bool(self.ingredients.strip()) or not self.nutriments.is_empty()

    def to_dict(self) -> dict[str, object]:
        """Serialize for API responses."""
        return {
            "barcode": self.barcode,
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "ingredients": self.ingredients,
            "nutriments": self.nutriments.to_dict(),
            "allergens": sorted(self.allergens),
            "additives": sorted(self.additives),
            "source": self.source,
        }

    def fingerprint(self) -> str:
        """Return a stable digest of everything the scorers read."""
        payload = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(payload.encode()).hexdigest()[:16]


@dataclass(frozen=True)
class CachedProduct:
    """A product as stored in the items table."""

    item_id: UUID
    product: Product
    cached_at: datetime


@dataclass(frozen=True)
class ProviderSearchResult:
    """Products returned by one provider search."""

    products: list[Product]
    total_count: int
