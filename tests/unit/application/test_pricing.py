"""Tests for SuggestPriceUseCase."""

from __future__ import annotations

import pytest

from app.application.use_cases.pricing import SuggestPriceUseCase
from app.domain.value_objects.enums import UrgencyLevel
from app.domain.value_objects.pricing import PricingConfig, PricingRule
from fakes import FakePricingRepo


@pytest.mark.asyncio
async def test_rule_from_store_is_used():
    repo = FakePricingRepo([PricingRule("electricidad", UrgencyLevel.MEDIUM, 900.0, 1.3)])
    price = await SuggestPriceUseCase(repo).execute("electricidad", UrgencyLevel.MEDIUM)
    assert price == 1170.0


@pytest.mark.asyncio
async def test_rules_are_reloaded_per_call():
    repo = FakePricingRepo()
    uc = SuggestPriceUseCase(repo, PricingConfig(default_base_price=600.0))

    assert await uc.execute("electricidad", UrgencyLevel.LOW) == 600.0

    repo.rules.append(PricingRule("electricidad", UrgencyLevel.LOW, 700.0, 1.0))
    assert await uc.execute("electricidad", UrgencyLevel.LOW) == 700.0
