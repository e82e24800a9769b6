"""Tests for provider payload normalization."""

import pytest

from rawscan.services.normalization import (
    UNCATEGORIZED,
    clean_amount,
    complete_salt_and_sodium,
    map_fdc_food,
    map_off_product,
    normalize_tag,
)


def test_fdc_search_hit_shape_is_mapped() -> None:
    food = {
        "description": "Cheddar Crackers",
        "brandName": "CRUNCHY",
        "foodCategory": "Crackers",
        "ingredients": "enriched flour, cheese",
        "foodNutrients": [
            {"nutrientId": 1062, "unitName": "KJ", "value": 2092},
            {"nutrientId": 1003, "unitName": "G", "value": 9.5},
            {"nutrientId": 1093, "unitName": "MG", "value": 800},
            {"nutrientId": 9999, "unitName": "G", "value": 1},
        ],
    }

    product = map_fdc_food(food, "0001")

    assert product.category == "crackers"
    assert product.brand == "CRUNCHY"
    assert product.nutriments.energy_kcal == pytest.approx(500, abs=0.01)
    assert product.nutriments.protein == 9.5
    assert product.nutriments.sodium == pytest.approx(0.8)
    assert product.nutriments.salt == pytest.approx(2.0)


def test_fdc_food_without_category_is_uncategorized() -> None:
    product = map_fdc_food({"description": "Thing"}, "0001")

    assert product.category == UNCATEGORIZED
    assert product.nutriments.is_empty()


def test_off_energy_falls_back_to_kilojoules() -> None:
    product = map_off_product(
        {"product_name": "Spread", "nutriments": {"energy_100g": 418.4}}, "0001"
    )

    assert product.nutriments.energy_kcal == 100.0


def test_off_sodium_is_derived_from_salt() -> None:
    product = map_off_product(
        {"product_name": "Chips", "nutriments": {"salt_100g": 1.25}}, "0001"
    )

    assert product.nutriments.sodium == 0.5


def test_off_categories_string_is_used_without_tags() -> None:
    product = map_off_product(
        {"product_name": "Juice", "categories": "Beverages, Fruit juices"}, "0001"
    )

    assert product.category == "beverages"


def test_off_negative_and_garbage_values_are_dropped() -> None:
    product = map_off_product(
        {
            "product_name": "Odd",
            "nutriments": {"sugars_100g": -3, "fat_100g": "n/a", "fiber_100g": "2.5"},
        },
        "0001",
    )

    assert product.nutriments.sugars is None
    assert product.nutriments.fat is None
    assert product.nutriments.fiber == 2.5


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1, 1.0), ("2.5", 2.5), (None, None), (True, None), (float("inf"), None), (-1, None)],
)
def test_clean_amount(value: object, expected: float | None) -> None:
    assert clean_amount(value) == expected


def test_normalize_tag() -> None:
    assert normalize_tag("en:Breakfast Cereals") == "breakfast-cereals"
    assert normalize_tag("e330") == "e330"


def test_salt_and_sodium_are_left_alone_when_both_known() -> None:
    assert complete_salt_and_sodium({"salt": 1.0, "sodium": 0.3}) == {
        "salt": 1.0,
        "sodium": 0.3,
    }
