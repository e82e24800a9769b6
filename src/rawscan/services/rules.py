"""Rules engine: weighted rule catalog evaluated against a product.

Scores are produced by the ``linear-clamp-v1`` transform: the signed sum of
matched rule weights is added to a neutral baseline of 50 and clamped to
[0, 100], rounded to two decimals. The transform name is part of the catalog
version, so changing it changes every catalog version and no stored score is
silently compared against a different scale.
"""

import hashlib
import json
import logging
import math
import operator
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from rawscan.domain.products import NUTRIMENT_FIELDS, Product
from rawscan.domain.rules import RuleDefinition, RuleType
from rawscan.domain.scores import ExplanationEntry, RulesOutcome
from rawscan.errors import ScoreComputationError

BASELINE_SCORE = 50.0
MIN_SCORE = 0.0
MAX_SCORE = 100.0
SCORE_TRANSFORM = "linear-clamp-v1"

_TEXT_TARGETS = frozenset({"ingredients", "name"})
_TAG_TARGETS = frozenset({"additives", "allergens"})
_THRESHOLD = re.compile(r"^\s*(>=|<=|==|=|>|<)\s*(\d+(?:\.\d+)?)\s*$")
_COMPARATORS: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
    "==": operator.eq,
}
_NON_WORD = re.compile(r"[^\w\s-]+")
_SPACES = re.compile(r"\s+")

_logger = logging.getLogger(__name__)


def normalize_score(raw_total: float) -> float:
    """Map a raw weighted total onto [0, 100]."""
    if not math.isfinite(raw_total):
        raise ScoreComputationError(f"Raw score total is not finite: {raw_total}")
    score = round(min(MAX_SCORE, max(MIN_SCORE, BASELINE_SCORE + raw_total)), 2)
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ScoreComputationError(f"Normalized score out of range: {score}")
    return score


def normalize_text(text: str) -> str:
    """Lower-case text, turn punctuation into spaces and collapse whitespace."""
    return _SPACES.sub(" ", _NON_WORD.sub(" ", text.lower())).strip()


def catalog_version(rules: Sequence[RuleDefinition]) -> str:
    """Return a short digest of the transform and the ordered rule catalog."""
    payload = json.dumps(
        {"transform": SCORE_TRANSFORM, "rules": [rule.to_dict() for rule in rules]},
        sort_keys=True,
    )
    return hashlib.sha256(payload.encode()).hexdigest()[:12]


@dataclass(frozen=True)
class _CompiledRule:
    definition: RuleDefinition
    regex: re.Pattern[str] | None = None
    comparator: Callable[[float, float], bool] | None = None
    threshold: float | None = None


class RulesEngine:
    """Evaluates a read-only rule catalog. Safe to share across requests."""

    def __init__(self, rules: Sequence[RuleDefinition]) -> None:
        self._definitions = tuple(rules)
        self._compiled = tuple(_compile(rule) for rule in self._definitions)
        self.catalog_version = catalog_version(self._definitions)

    @property
    def rules(self) -> tuple[RuleDefinition, ...]:
        """Return the catalog in declared order."""
        return self._definitions

    def score(self, product: Product) -> RulesOutcome:
        """Score a product against every rule, in catalog order."""
        text = normalize_text(product.ingredients)
        explanation: list[ExplanationEntry] = []
        raw_total = 0.0
        for compiled in self._compiled:
            rationale = _evaluate(compiled, product, text)
            if rationale is None:
                continue
            rule = compiled.definition
            raw_total += rule.weight
            explanation.append(
                ExplanationEntry(
                    rule_id=rule.id,
                    category=rule.category,
                    contribution=rule.weight,
                    rationale=rationale,
                )
            )
        score = normalize_score(raw_total)
        _logger.debug(
            "Scored %s: raw=%s score=%s matches=%s",
            product.barcode,
            raw_total,
            score,
            len(explanation),
        )
        return RulesOutcome(score=score, explanation=explanation, raw_total=raw_total)


def _compile(rule: RuleDefinition) -> _CompiledRule:
    """Validate a rule and precompile its pattern."""
    if isinstance(rule.weight, bool) or not math.isfinite(rule.weight):
        raise ScoreComputationError(f"Rule {rule.id} has a non-finite weight")
    if rule.type in (RuleType.INGREDIENT_PATTERN, RuleType.ADDITIVE_FLAG):
        allowed = _TEXT_TARGETS if rule.type == RuleType.INGREDIENT_PATTERN else _TAG_TARGETS
        if rule.target not in allowed:
            raise ScoreComputationError(
                f"Rule {rule.id} targets unsupported field {rule.target!r}"
            )
        try:
            regex = re.compile(rule.pattern, re.IGNORECASE)
        except re.error as exc:
            raise ScoreComputationError(
                f"Rule {rule.id} has an invalid pattern {rule.pattern!r}: {exc}"
            ) from exc
        return _CompiledRule(definition=rule, regex=regex)
    if rule.type == RuleType.NUTRIENT_THRESHOLD:
        if rule.target not in NUTRIMENT_FIELDS:
            raise ScoreComputationError(
                f"Rule {rule.id} targets unknown nutrient {rule.target!r}"
            )
        match = _THRESHOLD.match(rule.pattern)
        if match is None:
            raise ScoreComputationError(
                f"Rule {rule.id} has an invalid threshold {rule.pattern!r}"
            )
        return _CompiledRule(
            definition=rule,
            comparator=_COMPARATORS[match.group(1)],
            threshold=float(match.group(2)),
        )
    raise ScoreComputationError(f"Rule {rule.id} has unknown type {rule.type!r}")


def _evaluate(compiled: _CompiledRule, product: Product, text: str) -> str | None:
    """Return the rationale when the rule matches, else None."""
    rule = compiled.definition
    if rule.type == RuleType.INGREDIENT_PATTERN:
        haystack = text if rule.target == "ingredients" else normalize_text(product.name)
        match = compiled.regex.search(haystack)
        if match is None:
            return None
        return rule.notes or f"Matched pattern: {rule.pattern}"

    if rule.type == RuleType.NUTRIENT_THRESHOLD:
        value = product.nutriments.value(rule.target)
        if value is None or not compiled.comparator(value, compiled.threshold):
            return None
        unit = "kcal" if rule.target == "energy_kcal" else "g"
        label = rule.notes or f"{rule.target} {rule.pattern}"
        return f"{label} ({value:g} {unit} per 100 g)"

    tags = product.additives if rule.target == "additives" else product.allergens
    flagged = sorted(tag for tag in tags if compiled.regex.search(tag))
    if not flagged:
        return None
    label = rule.notes or f"Flagged {rule.target}"
    return f"{label}: {', '.join(flagged)}"
