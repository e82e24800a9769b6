"""Mapping of provider payloads onto the canonical product schema.

Every provider speaks its own field names and units. The functions here are
the only place those names appear: anything not mapped explicitly is dropped.
Canonical units are grams per 100 g for masses and kcal per 100 g for energy.
"""

import math
import re

from rawscan.domain.products import Nutriments, Product

UNCATEGORIZED = "uncategorized"

_KJ_PER_KCAL = 4.184
_SALT_PER_SODIUM = 2.5

# FoodData Central nutrient ids.
_FDC_NUTRIENTS = {
    1008: "energy_kcal",
    2047: "energy_kcal",
    1062: "energy_kcal",
    1005: "carbohydrates",
    2000: "sugars",
    1063: "sugars",
    1079: "fiber",
    1003: "protein",
    1004: "fat",
    1258: "saturated_fat",
    1093: "sodium",
}

_UNIT_TO_GRAMS = {
    "g": 1.0,
    "mg": 1e-3,
    "ug": 1e-6,
    "µg": 1e-6,
    "mcg": 1e-6,
}

# Open Food Facts per-100g keys.
_OFF_NUTRIENTS = {
    "carbohydrates_100g": "carbohydrates",
    "sugars_100g": "sugars",
    "fiber_100g": "fiber",
    "proteins_100g": "protein",
    "fat_100g": "fat",
    "saturated-fat_100g": "saturated_fat",
    "sodium_100g": "sodium",
    "salt_100g": "salt",
}


def clean_amount(value: object) -> float | None:
    """Return a finite, non-negative float or None."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def normalize_tag(tag: str) -> str:
    """Strip a language prefix such as ``en:`` and lower-case a tag."""
    cleaned = tag.strip().lower()
    if re.match(r"^[a-z]{2}:", cleaned):
        cleaned = cleaned[3:]
    return cleaned.replace(" ", "-")


def complete_salt_and_sodium(values: dict[str, float]) -> dict[str, float]:
    """Derive salt from sodium, or sodium from salt, when only one is known."""
    if "sodium" in values and "salt" not in values:
        values["salt"] = round(values["sodium"] * _SALT_PER_SODIUM, 4)
    elif "salt" in values and "sodium" not in values:
        values["sodium"] = round(values["salt"] / _SALT_PER_SODIUM, 4)
    return values


def map_fdc_food(food: dict[str, object], barcode: str) -> Product:
    """Map a FoodData Central food (search hit or detail record)."""
    values: dict[str, float] = {}
    for nutrient in food.get("foodNutrients") or []:
        if not isinstance(nutrient, dict):
            continue
        info = nutrient.get("nutrient") or {}
        nutrient_id = info.get("id") or nutrient.get("nutrientId")
        field_name = _FDC_NUTRIENTS.get(nutrient_id)
        if field_name is None or field_name in values:
            continue
        amount = clean_amount(nutrient.get("amount", nutrient.get("value")))
        unit = str(info.get("unitName") or nutrient.get("unitName") or "").lower()
        converted = _convert_fdc_unit(field_name, amount, unit)
        if converted is not None:
            values[field_name] = converted
    complete_salt_and_sodium(values)

    category = food.get("brandedFoodCategory") or food.get("foodCategory")
    if isinstance(category, dict):
        category = category.get("description")
    return Product(
        barcode=barcode,
        name=str(food.get("description") or "").strip(),
        brand=_first_text(food.get("brandOwner") or food.get("brandName")),
        category=normalize_tag(str(category)) if category else UNCATEGORIZED,
        ingredients=str(food.get("ingredients") or "").strip(),
        nutriments=Nutriments(**values),
        source="usda",
    )


def map_off_product(payload: dict[str, object], barcode: str) -> Product:
    """Map an Open Food Facts product object."""
    nutriments = payload.get("nutriments") or {}
    values: dict[str, float] = {}
    for key, field_name in _OFF_NUTRIENTS.items():
        amount = clean_amount(nutriments.get(key))
        if amount is not None:
            values[field_name] = amount
    energy = clean_amount(nutriments.get("energy-kcal_100g"))
    if energy is None:
        energy_kj = clean_amount(nutriments.get("energy_100g"))
        if energy_kj is not None:
            energy = round(energy_kj / _KJ_PER_KCAL, 2)
    if energy is not None:
        values["energy_kcal"] = energy
    complete_salt_and_sodium(values)

    categories = _tags(payload.get("categories_tags"))
    if not categories and isinstance(payload.get("categories"), str):
        categories = [
            normalize_tag(part)
            for part in str(payload["categories"]).split(",")
            if part.strip()
        ]
    return Product(
        barcode=barcode,
        name=str(
            payload.get("product_name") or payload.get("product_name_en") or ""
        ).strip(),
        brand=_first_text(payload.get("brands")),
        category=categories[0] if categories else UNCATEGORIZED,
        ingredients=str(
            payload.get("ingredients_text") or payload.get("ingredients_text_en") or ""
        ).strip(),
        nutriments=Nutriments(**values),
        allergens=frozenset(_tags(payload.get("allergens_tags"))),
        additives=frozenset(_tags(payload.get("additives_tags"))),
        source="off",
    )


def _convert_fdc_unit(field_name: str, amount: float | None, unit: str) -> float | None:
    if amount is None:
        return None
    if field_name == "energy_kcal":
        if unit == "kj":
            return round(amount / _KJ_PER_KCAL, 2)
        return amount
    factor = _UNIT_TO_GRAMS.get(unit, 1.0)
    return round(amount * factor, 6)


def _tags(raw: object) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [normalize_tag(tag) for tag in raw if isinstance(tag, str) and tag.strip()]


def _first_text(raw: object) -> str | None:
    if not isinstance(raw, str):
        return None
    first = raw.split(",")[0].strip()
    return first or None
