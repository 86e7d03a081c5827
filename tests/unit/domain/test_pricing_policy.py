"""Tests for the suggested price calculation."""

from app.domain.value_objects.enums import UrgencyLevel
from app.domain.value_objects.pricing import PricingConfig, PricingRule

RULES = (
    PricingRule("plomeria", UrgencyLevel.HIGH, base_price=800.0, urgency_multiplier=1.8),
    PricingRule("plomeria", UrgencyLevel.LOW, base_price=800.0, urgency_multiplier=1.0, active=False),
)


def test_matching_rule_wins():
    config = PricingConfig(rules=RULES)
    assert config.suggest("Plomeria ", UrgencyLevel.HIGH) == 1440.0


def test_inactive_rule_falls_back_to_default_multiplier():
    config = PricingConfig(rules=RULES)
    assert config.suggest("plomeria", UrgencyLevel.LOW) == 500.0


def test_budget_used_as_base_without_rule():
    config = PricingConfig()
    assert config.suggest("pintura", UrgencyLevel.MEDIUM, base_price=1000.0) == 1300.0


def test_no_category_uses_default_base():
    config = PricingConfig(default_base_price=400.0)
    assert config.suggest(None, UrgencyLevel.HIGH) == 720.0


def test_custom_multipliers():
    config = PricingConfig(urgency_multipliers={UrgencyLevel.HIGH: 2.0})
    assert config.suggest(None, UrgencyLevel.HIGH) == 1000.0
    assert config.suggest(None, UrgencyLevel.LOW) == 500.0
