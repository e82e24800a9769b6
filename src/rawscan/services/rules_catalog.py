"""Rule catalog sources: the bundled seed catalog and the rules_catalog table."""

import logging
from typing import Protocol

from rawscan.domain.rules import RuleDefinition, RuleType
from rawscan.errors import ScoreComputationError

_logger = logging.getLogger(__name__)

_PATTERN = RuleType.INGREDIENT_PATTERN
_THRESHOLD = RuleType.NUTRIENT_THRESHOLD
_FLAG = RuleType.ADDITIVE_FLAG

DEFAULT_RULES: tuple[RuleDefinition, ...] = (
    # Penalties
    RuleDefinition(
        id="added-sugars",
        type=_PATTERN,
        target="ingredients",
        pattern=(
            r"high fructose corn syrup|corn syrup|glucose syrup|added sugar|"
            r"\bsugar\b|agave nectar|maple syrup|dextrose"
        ),
        weight=-20,
        category="sweeteners",
        notes="Added sugars",
    ),
    RuleDefinition(
        id="high-sugar",
        type=_THRESHOLD,
        target="sugars",
        pattern=">=22.5",
        weight=-10,
        category="sweeteners",
        notes="High sugar content",
    ),
    RuleDefinition(
        id="artificial-sweeteners",
        type=_PATTERN,
        target="ingredients",
        pattern=r"aspartame|sucralose|acesulfame|saccharin|neotame",
        weight=-6,
        category="artificial_sweeteners",
        notes="Artificial sweeteners",
    ),
    RuleDefinition(
        id="seed-oils",
        type=_PATTERN,
        target="ingredients",
        pattern=(
            r"soybean oil|canola oil|corn oil|cottonseed oil|sunflower oil|"
            r"safflower oil|vegetable oil|palm oil"
        ),
        weight=-10,
        category="seed_oils",
        notes="Seed or palm oils",
    ),
    RuleDefinition(
        id="high-sodium",
        type=_THRESHOLD,
        target="sodium",
        pattern=">0.4",
        weight=-8,
        category="sodium",
        notes="High sodium content",
    ),
    RuleDefinition(
        id="refined-carbs",
        type=_PATTERN,
        target="ingredients",
        pattern=r"white flour|enriched (?:wheat )?flour|wheat flour|refined wheat|white rice",
        weight=-8,
        category="refined_carbs",
        notes="Refined carbohydrates",
    ),
    RuleDefinition(
        id="trans-fats",
        type=_PATTERN,
        target="ingredients",
        pattern=r"partially hydrogenated|hydrogenated oil|trans fat",
        weight=-15,
        category="trans_fat",
        notes="Trans fats",
    ),
    RuleDefinition(
        id="high-saturated-fat",
        type=_THRESHOLD,
        target="saturated_fat",
        pattern=">5",
        weight=-6,
        category="saturated_fat",
        notes="High saturated fat content",
    ),
    RuleDefinition(
        id="energy-dense",
        type=_THRESHOLD,
        target="energy_kcal",
        pattern=">=500",
        weight=-4,
        category="energy_density",
        notes="Very energy dense",
    ),
    RuleDefinition(
        id="artificial-colors",
        type=_PATTERN,
        target="ingredients",
        pattern=r"red 40|yellow 5|yellow 6|blue 1|blue 2|red 3|caramel colou?r",
        weight=-5,
        category="colors",
        notes="Artificial colors",
    ),
    RuleDefinition(
        id="coloring-additives",
        type=_FLAG,
        target="additives",
        pattern=r"^e1\d{2}[a-z]?$",
        weight=-5,
        category="colors",
        notes="Coloring additives",
    ),
    RuleDefinition(
        id="preservatives",
        type=_PATTERN,
        target="ingredients",
        pattern=r"sodium benzoate|potassium sorbate|\bbht\b|\bbha\b|\btbhq\b",
        weight=-4,
        category="preservatives",
        notes="Chemical preservatives",
    ),
    RuleDefinition(
        id="preservative-additives",
        type=_FLAG,
        target="additives",
        pattern=r"^e2\d{2}[a-z]?$",
        weight=-3,
        category="preservatives",
        notes="Preservative additives",
    ),
    RuleDefinition(
        id="gluten-sources",
        type=_PATTERN,
        target="ingredients",
        pattern=r"\bwheat\b|\bbarley\b|\brye\b|\bgluten\b",
        weight=-2,
        category="gluten",
        notes="Contains gluten sources",
    ),
    RuleDefinition(
        id="meat",
        type=_PATTERN,
        target="ingredients",
        pattern=r"\bbeef\b|\bpork\b|\bchicken\b|\bturkey\b|\bbacon\b|gelatin|\blard\b",
        weight=-2,
        category="meat",
        notes="Contains meat or gelatin",
    ),
    # Bonuses
    RuleDefinition(
        id="high-fiber",
        type=_THRESHOLD,
        target="fiber",
        pattern=">=3",
        weight=6,
        category="fiber",
        notes="High fiber content",
    ),
    RuleDefinition(
        id="high-protein",
        type=_THRESHOLD,
        target="protein",
        pattern=">=10",
        weight=6,
        category="protein",
        notes="High protein content",
    ),
    RuleDefinition(
        id="whole-grains",
        type=_PATTERN,
        target="ingredients",
        pattern=r"whole grain|whole wheat|rolled oats|brown rice|quinoa",
        weight=8,
        category="whole_foods",
        notes="Whole grains",
    ),
    RuleDefinition(
        id="omega-3",
        type=_PATTERN,
        target="ingredients",
        pattern=r"omega-3|flaxseed|chia seed|walnuts|salmon|sardines",
        weight=8,
        category="healthy_fats",
        notes="Omega-3 fatty acids",
    ),
    RuleDefinition(
        id="probiotics",
        type=_PATTERN,
        target="ingredients",
        pattern=r"lactobacillus|bifidobacterium|probiotic|live (?:and active )?cultures",
        weight=6,
        category="probiotics",
        notes="Probiotic cultures",
    ),
    RuleDefinition(
        id="antioxidants",
        type=_PATTERN,
        target="ingredients",
        pattern=(
            r"blueberries|cranberries|pomegranate|green tea|dark chocolate|"
            r"vitamin c|vitamin e"
        ),
        weight=4,
        category="antioxidants",
        notes="Antioxidant sources",
    ),
)


class RulesRepository(Protocol):
    """Persistence interface for the rules catalog."""

    def list_rules(self) -> list[RuleDefinition]:
        """Return every rule in declared order."""


def rule_from_row(row: dict[str, object]) -> RuleDefinition:
    """Parse a rules_catalog row, rejecting unknown rule types."""
    raw_type = str(row.get("type", ""))
    try:
        rule_type = RuleType(raw_type)
    except ValueError as exc:
        raise ScoreComputationError(
            f"Rule {row.get('id')} has unknown type {raw_type!r}"
        ) from exc
    try:
        weight = float(row.get("weight"))
    except (TypeError, ValueError) as exc:
        raise ScoreComputationError(f"Rule {row.get('id')} has no numeric weight") from exc
    return RuleDefinition(
        id=str(row["id"]),
        type=rule_type,
        target=str(row.get("target", "")),
        pattern=str(row.get("pattern", "")),
        weight=weight,
        category=str(row.get("category", "")),
        notes=str(row.get("notes") or ""),
    )


def load_rules(source: str, repository: RulesRepository | None = None) -> list[RuleDefinition]:
    """Load the catalog from the configured source."""
    if source == "builtin":
        return list(DEFAULT_RULES)
    if source == "database":
        if repository is None:
            raise ValueError("A rules repository is required for the database source")
        rules = repository.list_rules()
        _logger.info("Loaded %s rules from rules_catalog", len(rules))
        return rules
    raise ValueError(f"Unknown rules source: {source}")
