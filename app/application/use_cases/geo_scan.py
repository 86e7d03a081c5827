"""GeoScanUseCase — coverage snapshot of professionals around a point."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.application.ports.professional_directory import ProfessionalDirectory
from app.domain.policies.eligibility import is_eligible
from app.domain.value_objects.geo_point import GeoPoint

DISTANCE_BUCKETS: tuple[tuple[str, float], ...] = (
    ("0-2km", 2.0),
    ("2-5km", 5.0),
    ("5-10km", 10.0),
)
OVERFLOW_BUCKET = "10km+"


@dataclass(frozen=True)
class ScanEntry:
    professional_id: int
    name: str
    distance_km: float
    specialty_match: bool
    location: GeoPoint


@dataclass
class GeoScanReport:
    scanned: int
    in_radius: int = 0
    by_distance: dict[str, int] = field(
        default_factory=lambda: {name: 0 for name, _ in DISTANCE_BUCKETS} | {OVERFLOW_BUCKET: 0}
    )
    professionals: list[ScanEntry] = field(default_factory=list)


def bucket_for(distance_km: float) -> str:
    for name, upper in DISTANCE_BUCKETS:
        if distance_km <= upper:
            return name
    return OVERFLOW_BUCKET


class GeoScanUseCase:
    def __init__(self, directory: ProfessionalDirectory):
        self._directory = directory

    async def execute(
        self, origin: GeoPoint, radius_km: float, category: str | None = None
    ) -> GeoScanReport:
        working_set = await self._directory.list_available(origin.bounding_box(radius_km))
        report = GeoScanReport(scanned=len(working_set))

        for professional in working_set:
            distance = origin.haversine_km(professional.location)
            if distance > radius_km:
                continue
            report.in_radius += 1
            report.by_distance[bucket_for(distance)] += 1
            report.professionals.append(
                ScanEntry(
                    professional_id=professional.id,
                    name=professional.name,
                    distance_km=round(distance, 2),
                    specialty_match=is_eligible(professional, category),
                    location=professional.location,
                )
            )

        report.professionals.sort(key=lambda e: (e.distance_km, e.professional_id))
        return report
