"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from rawscan.adapters.fdc_client import HttpxFdcClient
from rawscan.adapters.off_client import HttpxOpenFoodFactsClient
from rawscan.adapters.supabase_product_repository import SupabaseProductRepository
from rawscan.adapters.supabase_profile_repository import SupabaseProfileRepository
from rawscan.adapters.supabase_rules_repository import SupabaseRulesRepository
from rawscan.adapters.supabase_score_repository import SupabaseScoreRepository
from rawscan.config import Settings, parse_provider_priority
from rawscan.services.aggregator import ProviderAggregator
from rawscan.services.local_catalog import LOCAL_PRODUCTS
from rawscan.services.personalization import PersonalizationEngine
from rawscan.services.product_cache import ProductCache
from rawscan.services.products import ProductService
from rawscan.services.profiles import ProfileService
from rawscan.services.providers import (
    LocalCatalogProvider,
    OpenFoodFactsProvider,
    ProductProvider,
    UsdaProvider,
)
from rawscan.services.rules import RulesEngine
from rawscan.services.rules_catalog import load_rules
from rawscan.services.scores import ScoreStore
from rawscan.services.swaps import SwapRecommender
from rawscan.services.throttle import RequestThrottle


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_service: ProductService
    profile_service: ProfileService
    rules_engine: RulesEngine
    personalization: PersonalizationEngine
    score_store: ScoreStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    product_repository = SupabaseProductRepository(supabase_client)
    score_repository = SupabaseScoreRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    rules_repository = SupabaseRulesRepository(supabase_client)

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.provider_timeout_seconds,
    )
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        timeout_seconds=resolved_settings.provider_timeout_seconds,
    )
    throttle = RequestThrottle(
        max_requests=resolved_settings.provider_max_requests_per_minute
    )
    available: dict[str, ProductProvider] = {
        "usda": UsdaProvider(fdc_client, throttle=throttle),
        "off": OpenFoodFactsProvider(off_client, throttle=throttle),
        "local": LocalCatalogProvider(
            {product.barcode: product for product in LOCAL_PRODUCTS}
        ),
    }
    providers = [
        available[name]
        for name in parse_provider_priority(resolved_settings.provider_priority)
    ]
    aggregator = ProviderAggregator(
        providers=providers,
        timeout_seconds=resolved_settings.provider_timeout_seconds,
        retry_attempts=resolved_settings.provider_retry_attempts,
        retry_base_delay_seconds=resolved_settings.provider_retry_base_delay_seconds,
        deadline_seconds=resolved_settings.resolve_deadline_seconds,
    )
    cache = ProductCache(
        product_repository, ttl_seconds=resolved_settings.product_cache_ttl_seconds
    )
    rules_engine = RulesEngine(
        load_rules(resolved_settings.rules_source, rules_repository)
    )
    personalization = PersonalizationEngine()
    score_store = ScoreStore(score_repository)
    profile_service = ProfileService(profile_repository)
    product_service = ProductService(
        aggregator=aggregator,
        cache=cache,
        rules_engine=rules_engine,
        personalization=personalization,
        swap_recommender=SwapRecommender(cache, rules_engine, personalization),
        score_store=score_store,
        profile_service=profile_service,
        swap_limit=resolved_settings.swap_limit,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        product_service=product_service,
        profile_service=profile_service,
        rules_engine=rules_engine,
        personalization=personalization,
        score_store=score_store,
        close_resources=close_resources,
    )
