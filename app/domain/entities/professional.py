"""ProfessionalSnapshot — read model of a professional, owned by the profile store."""

from dataclasses import dataclass, field

from app.domain.value_objects.geo_point import GeoPoint


@dataclass(frozen=True)
class ProfessionalSnapshot:
    id: int
    name: str
    location: GeoPoint
    specialties: tuple[str, ...] = ()
    is_available: bool = True
    reputation_score: float = 0.0
    credentials: tuple[str, ...] = field(default=())
    has_description: bool = False
    has_photo: bool = False
    years_experience: int | None = None
    is_verified: bool = False
