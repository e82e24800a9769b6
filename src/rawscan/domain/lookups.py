"""Results of product lookups and searches."""

from dataclasses import dataclass, field
from uuid import UUID

from rawscan.domain.products import Product
from rawscan.domain.scores import ExplanationEntry, Swap


@dataclass(frozen=True)
class ScoreSummary:
    """Scores attached to a product lookup."""

    rules_score: float
    personalized_score: float
    explanation: list[ExplanationEntry]
    swaps: list[Swap]
    catalog_version: str
    record_id: UUID | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize using the remote contract's field names."""
        return {
            "rulesScore": self.rules_score,
            "personalizedScore": self.personalized_score,
            "explanation": [entry.to_dict() for entry in self.explanation],
            "swaps": [swap.to_dict() for swap in self.swaps],
            "catalogVersion": self.catalog_version,
            "recordId": str(self.record_id) if self.record_id else None,
        }


@dataclass(frozen=True)
class ProductResponse:
    """Outcome of ``product.get``."""

    ok: bool
    product: Product | None = None
    not_found: bool = False
    error: str | None = None
    from_cache: bool = False
    score: ScoreSummary | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize using the remote contract's field names."""
        payload: dict[str, object] = {"ok": self.ok}
        if self.product is not None:
            payload["product"] = self.product.to_dict()
            payload["fromCache"] = self.from_cache
        if self.not_found:
            payload["notFound"] = True
        if self.error is not None:
            payload["error"] = self.error
        if self.score is not None:
            payload["score"] = self.score.to_dict()
        return payload


@dataclass(frozen=True)
class ProductSearchResponse:
    """Outcome of ``product.search``."""

    ok: bool
    products: list[Product] = field(default_factory=list)
    error: str | None = None
    total_count: int | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize using the remote contract's field names."""
        payload: dict[str, object] = {
            "ok": self.ok,
            "products": [product.to_dict() for product in self.products],
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.total_count is not None:
            payload["totalCount"] = self.total_count
        return payload
