"""Healthier same-category alternatives from the product cache."""

from dataclasses import dataclass

from rawscan.domain.products import Product
from rawscan.domain.profiles import UserProfile
from rawscan.domain.scores import Swap
from rawscan.services.personalization import PersonalizationEngine
from rawscan.services.product_cache import ProductCache
from rawscan.services.rules import RulesEngine


@dataclass
class SwapRecommender:
    """Ranks cached products that beat a source product for the same profile."""

    cache: ProductCache
    rules_engine: RulesEngine
    personalization: PersonalizationEngine
    page_size: int = 100

    def find_swaps(
        self,
        product: Product,
        personalized_score: float,
        profile: UserProfile | None,
        limit: int,
    ) -> list[Swap]:
        """Return up to limit strictly better products, best first."""
        if limit <= 0:
            return []
        candidates = self.cache.candidates(
            product.category, exclude_barcode=product.barcode, page_size=self.page_size
        )
        swaps: list[Swap] = []
        for cached in candidates:
            candidate = cached.product
            if candidate.barcode == product.barcode:
                continue
            outcome = self.rules_engine.score(candidate)
            personalized = self.personalization.personalize(
                outcome.score, outcome.explanation, profile
            )
            if personalized.score > personalized_score:
                swaps.append(
                    Swap(
                        barcode=candidate.barcode,
                        name=candidate.name,
                        score=personalized.score,
                    )
                )
        swaps.sort(key=lambda swap: (-swap.score, swap.barcode))
        return swaps[:limit]
