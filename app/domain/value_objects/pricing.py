"""Pricing value objects — suggested price for an urgent request."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.value_objects.enums import UrgencyLevel

DEFAULT_URGENCY_MULTIPLIERS: dict[UrgencyLevel, float] = {
    UrgencyLevel.LOW: 1.0,
    UrgencyLevel.MEDIUM: 1.3,
    UrgencyLevel.HIGH: 1.8,
}


@dataclass(frozen=True)
class PricingRule:
    service_category: str
    urgency_level: UrgencyLevel
    base_price: float
    urgency_multiplier: float = 1.0
    active: bool = True


@dataclass(frozen=True)
class PricingConfig:
    """Snapshot of pricing inputs, resolved once per calculation call."""

    rules: tuple[PricingRule, ...] = ()
    default_base_price: float = 500.0
    urgency_multipliers: dict[UrgencyLevel, float] = field(
        default_factory=lambda: dict(DEFAULT_URGENCY_MULTIPLIERS)
    )

    def rule_for(self, category: str | None, urgency: UrgencyLevel) -> PricingRule | None:
        if not category:
            return None
        key = category.strip().lower()
        for rule in self.rules:
            if rule.active and rule.urgency_level == urgency and rule.service_category.lower() == key:
                return rule
        return None

    def suggest(
        self,
        category: str | None,
        urgency: UrgencyLevel,
        base_price: float | None = None,
    ) -> float:
        """Suggested price: matching rule first, else base × urgency multiplier.

        Not authoritative for settlement.
        """
        rule = self.rule_for(category, urgency)
        if rule is not None:
            return round(rule.base_price * rule.urgency_multiplier, 2)

        base = base_price or self.default_base_price
        return round(base * self.urgency_multipliers.get(urgency, 1.0), 2)
