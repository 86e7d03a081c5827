"""Seed the database with demo professionals, availability and pricing rules.

Usage:
    python -m app.tools.seed_db
    python -m app.tools.seed_db --professionals 200
    python -m app.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import async_session_factory, engine
from app.adapters.persistence.models import (
    AvailabilitySlotModel,
    ProfessionalProfileModel,
    UrgentAssignmentModel,
    UrgentCandidateModel,
    UrgentPricingRuleModel,
    UrgentRequestModel,
)
from app.domain.policies.eligibility import CATEGORY_SPECIALTIES
from app.domain.value_objects.enums import CredentialType, UrgencyLevel

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "Juan", "Carlos", "Luis", "Diego", "Miguel", "María", "Ana", "Laura", "Sofía", "Carmen",
    "Pablo", "Sergio", "Lucía", "Elena", "Victoria", "Gonzalo", "Patricia", "Rosa",
]
LAST_NAMES = [
    "García", "Rodríguez", "González", "Fernández", "López", "Martínez", "Sánchez", "Pérez",
    "Romero", "Navarro", "Torres", "Díaz", "Castro", "Ortiz", "Medina", "Suárez",
]
SPECIALTIES = [
    "Plomero", "Fontanero", "Electricista", "Instalador", "Carpintero", "Ebanista",
    "Pintor", "Decorador", "Jardinero", "Paisajista", "Personal de limpieza", "Reparador",
]

# Greater Buenos Aires
CENTER_LAT, CENTER_LON = -34.6037, -58.3816
SPREAD_DEG = 0.25

BASE_PRICES: dict[str, float] = {
    "plomeria": 800.0,
    "electricidad": 900.0,
    "carpinteria": 700.0,
    "pintura": 600.0,
    "jardineria": 500.0,
    "limpieza": 450.0,
    "reparaciones": 650.0,
}
URGENCY_MULTIPLIERS: dict[UrgencyLevel, float] = {
    UrgencyLevel.LOW: 1.0,
    UrgencyLevel.MEDIUM: 1.3,
    UrgencyLevel.HIGH: 1.8,
}


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        UrgentAssignmentModel,
        UrgentCandidateModel,
        UrgentRequestModel,
        AvailabilitySlotModel,
        ProfessionalProfileModel,
        UrgentPricingRuleModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


def _random_professional(rng: random.Random) -> ProfessionalProfileModel:
    specialties = rng.sample(SPECIALTIES, k=rng.randint(1, 3))
    credentials = [c.value for c in CredentialType if rng.random() < 0.35]
    return ProfessionalProfileModel(
        name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        latitude=round(CENTER_LAT + rng.uniform(-SPREAD_DEG, SPREAD_DEG), 6),
        longitude=round(CENTER_LON + rng.uniform(-SPREAD_DEG, SPREAD_DEG), 6),
        specialties=specialties,
        is_available=rng.random() < 0.85,
        is_blocked=rng.random() < 0.03,
        reputation_score=round(rng.uniform(40, 100), 1),
        credentials=credentials,
        description=f"Profesional de {', '.join(specialties).lower()}" if rng.random() < 0.8 else None,
        photo_url=f"https://example.invalid/photos/{rng.randint(1, 10_000)}.jpg" if rng.random() < 0.6 else None,
        years_experience=rng.randint(1, 25) if rng.random() < 0.7 else None,
        is_verified=CredentialType.IDENTITY_VERIFIED.value in credentials,
    )


def _slots_for(professional_id: int, rng: random.Random, now: datetime) -> list[AvailabilitySlotModel]:
    slots = []
    for _ in range(rng.randint(0, 4)):
        start = now + timedelta(hours=rng.randint(1, 47))
        slots.append(
            AvailabilitySlotModel(
                professional_id=professional_id,
                start_time=start,
                end_time=start + timedelta(hours=2),
                status="available" if rng.random() < 0.8 else "booked",
            )
        )
    return slots


async def seed(professionals: int = 100, drop: bool = False, rng_seed: int = 42) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    rng = random.Random(rng_seed)
    now = datetime.now(timezone.utc)
    counts = {"professionals": 0, "slots": 0, "pricing_rules": 0}

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        # 1. Pricing rules (skip existing category/urgency pairs)
        existing = {
            (r.service_category, r.urgency_level)
            for r in (await session.execute(select(UrgentPricingRuleModel))).scalars()
        }
        for category in CATEGORY_SPECIALTIES:
            for urgency, multiplier in URGENCY_MULTIPLIERS.items():
                if (category, urgency.value) in existing:
                    continue
                session.add(
                    UrgentPricingRuleModel(
                        service_category=category,
                        urgency_level=urgency.value,
                        base_price=BASE_PRICES.get(category, 500.0),
                        urgency_multiplier=multiplier,
                        active=True,
                    )
                )
                counts["pricing_rules"] += 1
        await session.commit()

        # 2. Professionals + availability slots
        for _ in range(professionals):
            m = _random_professional(rng)
            session.add(m)
            await session.flush()
            counts["professionals"] += 1
            for slot in _slots_for(m.id, rng, now):
                session.add(slot)
                counts["slots"] += 1
        await session.commit()

    logger.info(
        "Seeded %d professionals, %d availability slots, %d pricing rules",
        counts["professionals"], counts["slots"], counts["pricing_rules"],
    )
    return counts


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        total = (await session.execute(select(func.count(ProfessionalProfileModel.id)))).scalar()
        available = (
            await session.execute(
                select(func.count(ProfessionalProfileModel.id)).where(
                    ProfessionalProfileModel.is_available.is_(True),
                    ProfessionalProfileModel.is_blocked.is_(False),
                )
            )
        ).scalar()
        slots = (await session.execute(select(func.count(AvailabilitySlotModel.id)))).scalar()
        rules = (await session.execute(select(func.count(UrgentPricingRuleModel.id)))).scalar()

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Professionals:        {total}")
        print(f"Available/unblocked:  {available}")
        print(f"Availability slots:   {slots}")
        print(f"Pricing rules:        {rules}")
        print(f"{'='*50}\n")


async def _run(args: argparse.Namespace) -> None:
    try:
        await seed(args.professionals, drop=args.drop, rng_seed=args.seed)
        await _verify_data()
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the urgent dispatch database with demo data")
    parser.add_argument("--professionals", type=int, default=100, help="Number of professionals to create")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible data")
    parser.add_argument("--drop", action="store_true", help="Drop existing data first")
    args = parser.parse_args()

    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
