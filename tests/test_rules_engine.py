"""Tests for the deterministic rules engine."""

import math
from dataclasses import replace

import pytest

from rawscan.domain.products import Product
from rawscan.domain.rules import RuleDefinition, RuleType
from rawscan.errors import ScoreComputationError
from rawscan.services.local_catalog import LOCAL_PRODUCTS
from rawscan.services.rules import (
    BASELINE_SCORE,
    RulesEngine,
    catalog_version,
    normalize_score,
)
from rawscan.services.rules_catalog import DEFAULT_RULES
from tests.conftest import make_product

HFCS_RULE = RuleDefinition(
    id="hfcs",
    type=RuleType.INGREDIENT_PATTERN,
    target="ingredients",
    pattern="high fructose corn syrup",
    weight=-20,
    category="sweeteners",
)


def test_matching_pattern_contributes_its_weight() -> None:
    outcome = RulesEngine([HFCS_RULE]).score(
        make_product(ingredients="water, high fructose corn syrup")
    )

    assert outcome.score == 30.0
    assert outcome.raw_total == -20
    assert [entry.rule_id for entry in outcome.explanation] == ["hfcs"]
    assert outcome.explanation[0].contribution == -20


def test_no_matches_gives_baseline() -> None:
    engine = RulesEngine([HFCS_RULE])

    outcome = engine.score(make_product(ingredients="spring water"))

    assert outcome.score == BASELINE_SCORE
    assert outcome.explanation == []


def test_matching_is_case_insensitive() -> None:
    engine = RulesEngine([HFCS_RULE])

    outcome = engine.score(make_product(ingredients="HIGH FRUCTOSE CORN SYRUP."))

    assert outcome.score == 30.0


def test_scoring_is_deterministic() -> None:
    engine = RulesEngine(DEFAULT_RULES)
    product = LOCAL_PRODUCTS[0]

    assert engine.score(product) == engine.score(product)
    assert RulesEngine(DEFAULT_RULES).catalog_version == engine.catalog_version


@pytest.mark.parametrize("product", LOCAL_PRODUCTS, ids=lambda product: product.name)
def test_scores_stay_in_bounds(product: Product) -> None:
    outcome = RulesEngine(DEFAULT_RULES).score(product)

    assert 0 <= outcome.score <= 100
    assert math.isclose(
        outcome.raw_total, sum(entry.contribution for entry in outcome.explanation)
    )


def test_default_catalog_penalizes_soda() -> None:
    outcome = RulesEngine(DEFAULT_RULES).score(LOCAL_PRODUCTS[0])

    contributions = {entry.rule_id: entry.contribution for entry in outcome.explanation}
    assert contributions["added-sugars"] == -20
    assert outcome.score < BASELINE_SCORE


def test_explanation_follows_catalog_order() -> None:
    rules = [
        RuleDefinition(
            id="fiber",
            type=RuleType.NUTRIENT_THRESHOLD,
            target="fiber",
            pattern=">=3",
            weight=6,
            category="whole_foods",
        ),
        HFCS_RULE,
    ]
    product = make_product(ingredients="high fructose corn syrup", fiber=4.0)

    outcome = RulesEngine(rules).score(product)

    assert [entry.rule_id for entry in outcome.explanation] == ["fiber", "hfcs"]
    assert outcome.score == 36.0


def test_threshold_ignores_unknown_nutriments() -> None:
    rule = RuleDefinition(
        id="salty",
        type=RuleType.NUTRIENT_THRESHOLD,
        target="sodium",
        pattern=">0.4",
        weight=-8,
        category="sodium",
    )

    outcome = RulesEngine([rule]).score(make_product())

    assert outcome.explanation == []


def test_additive_flag_lists_flagged_tags() -> None:
    rule = RuleDefinition(
        id="colors",
        type=RuleType.ADDITIVE_FLAG,
        target="additives",
        pattern=r"^e1\d{2}[a-z]?$",
        weight=-5,
        category="colors",
    )
    product = Product(
        barcode="1",
        name="Candy",
        category="sweets",
        ingredients="sugar",
        source="stub",
        additives=frozenset({"e150d", "e330"}),
    )

    outcome = RulesEngine([rule]).score(product)

    assert outcome.explanation[0].rationale.endswith("e150d")


def test_score_is_clamped() -> None:
    rule = RuleDefinition(
        id="huge",
        type=RuleType.INGREDIENT_PATTERN,
        target="ingredients",
        pattern="oats",
        weight=500,
        category="whole_foods",
    )

    assert RulesEngine([rule]).score(make_product()).score == 100.0
    assert normalize_score(-1000) == 0.0


def test_normalize_score_rejects_non_finite_totals() -> None:
    with pytest.raises(ScoreComputationError):
        normalize_score(float("nan"))


@pytest.mark.parametrize(
    ("rule_type", "target", "pattern"),
    [
        (RuleType.INGREDIENT_PATTERN, "ingredients", "(unclosed"),
        (RuleType.INGREDIENT_PATTERN, "nutriments", "sugar"),
        (RuleType.NUTRIENT_THRESHOLD, "sugars", "about 5"),
        (RuleType.NUTRIENT_THRESHOLD, "vitamins", ">5"),
        (RuleType.ADDITIVE_FLAG, "ingredients", "e1"),
    ],
)
def test_malformed_rules_are_rejected(
    rule_type: RuleType, target: str, pattern: str
) -> None:
    rule = RuleDefinition(
        id="bad",
        type=rule_type,
        target=target,
        pattern=pattern,
        weight=-1,
        category="misc",
    )

    with pytest.raises(ScoreComputationError):
        RulesEngine([rule])


def test_catalog_version_changes_with_rules() -> None:
    last = DEFAULT_RULES[-1]
    tweaked = [*DEFAULT_RULES[:-1], replace(last, weight=last.weight + 1)]

    assert catalog_version(tweaked) != catalog_version(DEFAULT_RULES)
