"""Port interface for pricing rules (read-only here)."""

from abc import ABC, abstractmethod

from app.domain.value_objects.pricing import PricingRule


class PricingRuleRepository(ABC):
    @abstractmethod
    async def get_active_rules(self) -> list[PricingRule]:
        ...
