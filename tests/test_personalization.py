"""Tests for goal-based personalization."""

from rawscan.domain.profiles import UserProfile
from rawscan.domain.scores import ExplanationEntry
from rawscan.services.personalization import PersonalizationEngine, normalize_goal

SUGAR_ENTRY = ExplanationEntry(
    rule_id="added-sugars",
    category="sweeteners",
    contribution=-20,
    rationale="Added sugars",
)
FIBER_ENTRY = ExplanationEntry(
    rule_id="high-fiber",
    category="whole_foods",
    contribution=6,
    rationale="High fiber",
)


def test_no_profile_returns_rules_score() -> None:
    outcome = PersonalizationEngine().personalize(30.0, [SUGAR_ENTRY], None)

    assert outcome.score == 30.0
    assert outcome.explanation == [SUGAR_ENTRY]
    assert outcome.multipliers == {}


def test_low_sugar_goal_doubles_sugar_penalty() -> None:
    profile = UserProfile(diet_goals=frozenset({"low-sugar"}))

    outcome = PersonalizationEngine().personalize(30.0, [SUGAR_ENTRY], profile)

    assert outcome.score == 10.0
    assert outcome.explanation[0].contribution == -40
    assert outcome.multipliers == {"sweeteners": 2.0}


def test_unrelated_goals_leave_score_unchanged() -> None:
    profile = UserProfile(lifestyle_goals=frozenset({"learn_to_juggle"}))

    outcome = PersonalizationEngine().personalize(30.0, [SUGAR_ENTRY], profile)

    assert outcome.score == 30.0
    assert outcome.multipliers == {}


def test_goals_compound_multiplicatively() -> None:
    engine = PersonalizationEngine(
        table={
            "a": {"sweeteners": 2.0},
            "b": {"sweeteners": 1.5},
        }
    )
    profile = UserProfile(health_goals=frozenset({"a", "b"}))

    assert engine.multipliers(profile) == {"sweeteners": 3.0}


def test_only_matched_categories_are_reported() -> None:
    engine = PersonalizationEngine(
        table={"goal": {"sweeteners": 2.0, "sodium": 1.5, "whole_foods": 1.5}}
    )
    profile = UserProfile(body_goal="goal")

    outcome = engine.personalize(36.0, [SUGAR_ENTRY, FIBER_ENTRY], profile)

    assert outcome.multipliers == {"sweeteners": 2.0, "whole_foods": 1.5}
    assert outcome.score == 19.0


def test_normalize_goal() -> None:
    assert normalize_goal(" Low-Sugar ") == "low_sugar"
    assert normalize_goal("heart health") == "heart_health"
