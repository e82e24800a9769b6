"""Product lookup flow: cache, providers, scoring, swaps and score store."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from rawscan.domain.lookups import ProductResponse, ProductSearchResponse, ScoreSummary
from rawscan.domain.products import CachedProduct
from rawscan.domain.profiles import UserProfile
from rawscan.domain.scores import ExplanationEntry, ScoreRecord
from rawscan.errors import RawScanError, ScoreComputationError, ValidationError
from rawscan.services.aggregator import ProviderAggregator, validate_barcode
from rawscan.services.personalization import PersonalizationEngine
from rawscan.services.product_cache import ProductCache
from rawscan.services.profiles import ProfileService
from rawscan.services.rules import SCORE_TRANSFORM, RulesEngine
from rawscan.services.scores import ScoreStore
from rawscan.services.swaps import SwapRecommender

_logger = logging.getLogger(__name__)


@dataclass
class ProductService:
    """Resolves barcodes into scored products."""

    aggregator: ProviderAggregator
    cache: ProductCache
    rules_engine: RulesEngine
    personalization: PersonalizationEngine
    swap_recommender: SwapRecommender
    score_store: ScoreStore
    profile_service: ProfileService | None = None
    swap_limit: int = 3

    async def get_product(
        self,
        barcode: str,
        profile: UserProfile | None = None,
        user_id: str | None = None,
    ) -> ProductResponse:
        """Resolve and score a barcode.

        Raises ValidationError for malformed barcodes. Every other failure is
        returned as ``ok=False`` with an error message.
        """
        cleaned = validate_barcode(barcode)
        try:
            if profile is None and user_id and self.profile_service is not None:
                profile = self.profile_service.get_profile(user_id)
            cached, from_cache = await self.cache.get_or_resolve(
                cleaned, self.aggregator.resolve
            )
            if cached is None:
                _logger.info("Product not found", extra={"barcode": cleaned})
                return ProductResponse(ok=True, not_found=True)
            score = self._score(cached, profile, user_id)
        except ValidationError:
            raise
        except ScoreComputationError as exc:
            _logger.exception("Score computation failed", extra={"barcode": cleaned})
            return ProductResponse(ok=False, error=str(exc))
        except RawScanError as exc:
            _logger.warning("Product lookup failed for %s: %s", cleaned, exc)
            return ProductResponse(ok=False, error=str(exc))
        return ProductResponse(
            ok=True, product=cached.product, from_cache=from_cache, score=score
        )

    async def search(self, query: str, limit: int = 10) -> ProductSearchResponse:
        """Search providers and remember the results in the product cache."""
        try:
            result = await self.aggregator.search(query, limit)
            self.cache.remember(result.products)
        except ValidationError:
            raise
        except RawScanError as exc:
            _logger.warning("Product search failed for %r: %s", query, exc)
            return ProductSearchResponse(ok=False, error=str(exc))
        return ProductSearchResponse(
            ok=True, products=result.products, total_count=result.total_count
        )

    def _score(
        self,
        cached: CachedProduct,
        profile: UserProfile | None,
        user_id: str | None,
    ) -> ScoreSummary:
        user_ref = user_id or (profile.user_id if profile else None)
        product = cached.product
        details = {
            "catalog_version": self.rules_engine.catalog_version,
            "profile_fingerprint": profile.fingerprint() if profile else None,
            "product_fingerprint": product.fingerprint(),
        }
        outcome = self.rules_engine.score(product)
        personalized = self.personalization.personalize(
            outcome.score, outcome.explanation, profile
        )
        swaps = self.swap_recommender.find_swaps(
            product, personalized.score, profile, self.swap_limit
        )

        # A stored record is only reused while it still describes this exact result.
        existing = self.score_store.load(cached.item_id, user_ref)
        if (
            existing is not None
            and all(existing.details.get(key) == value for key, value in details.items())
            and existing.swaps == swaps
        ):
            return ScoreSummary(
                rules_score=existing.rules_score,
                personalized_score=existing.personalized_score,
                explanation=existing.explanation,
                swaps=existing.swaps,
                catalog_version=self.rules_engine.catalog_version,
                record_id=existing.id,
            )

        record = ScoreRecord(
            item_id=cached.item_id,
            user_id=user_ref,
            rules_score=outcome.score,
            personalized_score=personalized.score,
            explanation=personalized.explanation,
            swaps=swaps,
            details={
                **details,
                "transform": SCORE_TRANSFORM,
                "raw_total": outcome.raw_total,
                "rules_explanation": _entries(outcome.explanation),
                "multipliers": personalized.multipliers,
            },
            created_at=datetime.now(tz=UTC),
        )
        record_id = self.score_store.save(record)
        return ScoreSummary(
            rules_score=record.rules_score,
            personalized_score=record.personalized_score,
            explanation=record.explanation,
            swaps=swaps,
            catalog_version=self.rules_engine.catalog_version,
            record_id=record_id,
        )


def _entries(explanation: list[ExplanationEntry]) -> list[dict[str, object]]:
    return [entry.to_dict() for entry in explanation]
