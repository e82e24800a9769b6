"""Tests for same-category swap recommendations."""

from rawscan.domain.profiles import UserProfile
from rawscan.services.personalization import PersonalizationEngine
from rawscan.services.product_cache import ProductCache
from rawscan.services.rules import RulesEngine
from rawscan.services.rules_catalog import DEFAULT_RULES
from rawscan.services.swaps import SwapRecommender
from tests.conftest import InMemoryProductRepository, make_product


def _recommender(repository: InMemoryProductRepository) -> SwapRecommender:
    return SwapRecommender(
        cache=ProductCache(repository),
        rules_engine=RulesEngine(DEFAULT_RULES),
        personalization=PersonalizationEngine(),
    )


def test_swaps_are_strictly_better_and_ordered() -> None:
    repository = InMemoryProductRepository()
    source = make_product(barcode="100", ingredients="sugar, white flour")
    repository.seed(source)
    repository.seed(make_product(barcode="200", ingredients="rolled oats", fiber=8))
    repository.seed(make_product(barcode="300", ingredients="water"))
    repository.seed(make_product(barcode="400", ingredients="sugar, white flour"))
    repository.seed(
        make_product(barcode="500", category="beverages", ingredients="rolled oats")
    )
    recommender = _recommender(repository)
    source_score = recommender.rules_engine.score(source).score

    swaps = recommender.find_swaps(source, source_score, None, limit=5)

    assert [swap.barcode for swap in swaps] == ["200", "300"]
    assert all(swap.score > source_score for swap in swaps)
    assert swaps[0].score >= swaps[1].score


def test_ties_are_broken_by_barcode() -> None:
    repository = InMemoryProductRepository()
    source = make_product(barcode="100", ingredients="sugar")
    for barcode in ("300", "200"):
        repository.seed(make_product(barcode=barcode, ingredients="water"))

    swaps = _recommender(repository).find_swaps(source, 30.0, None, limit=3)

    assert [swap.barcode for swap in swaps] == ["200", "300"]


def test_swaps_respect_limit() -> None:
    repository = InMemoryProductRepository()
    for index in range(5):
        repository.seed(make_product(barcode=f"2{index}", ingredients="water"))

    swaps = _recommender(repository).find_swaps(
        make_product(barcode="100"), 10.0, None, limit=2
    )

    assert len(swaps) == 2


def test_no_better_candidates_gives_empty_list() -> None:
    repository = InMemoryProductRepository()
    repository.seed(make_product(barcode="200", ingredients="sugar"))

    swaps = _recommender(repository).find_swaps(
        make_product(barcode="100", ingredients="water"), 50.0, None, limit=3
    )

    assert swaps == []


def test_candidates_are_scored_for_the_same_profile() -> None:
    repository = InMemoryProductRepository()
    repository.seed(make_product(barcode="200", ingredients="sugar, rolled oats"))
    profile = UserProfile(health_goals=frozenset({"low_sugar"}))
    recommender = _recommender(repository)

    source = make_product(barcode="100")

    without_profile = recommender.find_swaps(source, 30.0, None, 3)
    with_profile = recommender.find_swaps(source, 30.0, profile, 3)

    assert [(swap.barcode, swap.score) for swap in without_profile] == [("200", 38.0)]
    assert with_profile == []


def test_candidates_beyond_one_page_are_considered() -> None:
    repository = InMemoryProductRepository()
    for index in range(7):
        repository.seed(make_product(barcode=f"2{index:02d}", ingredients="sugar"))
    repository.seed(make_product(barcode="900", ingredients="water"))
    recommender = SwapRecommender(
        cache=ProductCache(repository),
        rules_engine=RulesEngine(DEFAULT_RULES),
        personalization=PersonalizationEngine(),
        page_size=3,
    )

    swaps = recommender.find_swaps(
        make_product(barcode="100", ingredients="sugar"), 30.0, None, limit=3
    )

    assert [swap.barcode for swap in swaps] == ["900"]
