"""ProfessionalFinder — ranked, distance-bounded eligible professionals."""

from __future__ import annotations

import asyncio
import logging

from app.application.clock import Clock, utc_now
from app.application.ports.availability_port import AvailabilityPort
from app.application.ports.professional_directory import ProfessionalDirectory
from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.policies.eligibility import is_eligible
from app.domain.policies.ranking import ScoredProfessional, rank_professionals
from app.domain.policies.scoring import score_professional
from app.domain.value_objects.dispatch_policy import DispatchPolicy
from app.domain.value_objects.geo_point import GeoPoint

logger = logging.getLogger(__name__)


class ProfessionalFinder:
    """Geo filter → eligibility → near-term availability → score → rank."""

    def __init__(
        self,
        directory: ProfessionalDirectory,
        availability: AvailabilityPort,
        policy: DispatchPolicy | None = None,
        clock: Clock = utc_now,
    ):
        self._directory = directory
        self._availability = availability
        self._policy = policy or DispatchPolicy()
        self._clock = clock

    async def find_candidates(
        self,
        origin: GeoPoint,
        category: str | None,
        radius_km: float,
        exclude: frozenset[int] = frozenset(),
        limit: int | None = None,
    ) -> list[ScoredProfessional]:
        """Return the top professionals for a request at *origin*.

        Args:
            origin: request location.
            category: requested service category (None = any).
            radius_km: inclusive search radius.
            exclude: professional ids that must not appear (applied before truncation).
            limit: max results, defaults to the policy's finder limit.
        """
        working_set = await self._directory.list_available(origin.bounding_box(radius_km))

        in_range: list[tuple[ProfessionalSnapshot, float]] = []
        for professional in working_set:
            if professional.id in exclude or not professional.is_available:
                continue
            distance = origin.haversine_km(professional.location)
            if distance > radius_km:
                continue
            if not is_eligible(professional, category):
                continue
            in_range.append((professional, distance))

        checks = await asyncio.gather(
            *(self.has_near_term_availability(p.id) for p, _ in in_range)
        )

        scored = [
            ScoredProfessional(
                professional=professional,
                distance_km=distance,
                score=score_professional(professional, distance),
            )
            for (professional, distance), available in zip(in_range, checks)
            if available
        ]

        ranked = rank_professionals(scored, limit or self._policy.finder_limit)
        logger.debug(
            "Finder at (%f, %f) r=%.1f km, category=%s: %d scanned, %d ranked",
            origin.latitude, origin.longitude, radius_km, category,
            len(working_set), len(ranked),
        )
        return ranked

    async def has_near_term_availability(self, professional_id: int) -> bool:
        """Open slot within the availability window; errors fail open."""
        start = self._clock()
        end = start + self._policy.availability_window
        try:
            return await self._availability.has_open_slot(professional_id, start, end)
        except Exception as e:
            fail_open = self._policy.availability_fail_open
            logger.warning(
                "Availability check failed for professional %s, treating as %s: %s",
                professional_id, "available" if fail_open else "unavailable", e,
            )
            return fail_open
