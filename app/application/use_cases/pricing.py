"""SuggestPriceUseCase — resolve pricing config once, then price a request."""

from __future__ import annotations

from app.application.ports.pricing_repo import PricingRuleRepository
from app.domain.value_objects.enums import UrgencyLevel
from app.domain.value_objects.pricing import PricingConfig


class SuggestPriceUseCase:
    def __init__(self, pricing_repo: PricingRuleRepository, defaults: PricingConfig | None = None):
        self._pricing = pricing_repo
        self._defaults = defaults or PricingConfig()

    async def load_config(self) -> PricingConfig:
        """Fresh snapshot of the active rules layered over the configured defaults."""
        rules = await self._pricing.get_active_rules()
        return PricingConfig(
            rules=tuple(rules),
            default_base_price=self._defaults.default_base_price,
            urgency_multipliers=dict(self._defaults.urgency_multipliers),
        )

    async def execute(
        self,
        category: str | None,
        urgency: UrgencyLevel,
        base_price: float | None = None,
    ) -> float:
        config = await self.load_config()
        return config.suggest(category, urgency, base_price)
