"""GeoPoint value object — immutable (lat, lon) pair."""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two (lat, lon) pairs in degrees.

    Input ranges are not validated here; callers validate coordinates.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


@dataclass(frozen=True)
class BoundingBox:
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, point: "GeoPoint") -> bool:
        return (
            self.min_latitude <= point.latitude <= self.max_latitude
            and self.min_longitude <= point.longitude <= self.max_longitude
        )


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def haversine_km(self, other: "GeoPoint") -> float:
        """Calculate distance in km between two points using the Haversine formula."""
        return haversine_km(self.latitude, self.longitude, other.latitude, other.longitude)

    def bounding_box(self, radius_km: float) -> BoundingBox:
        """Coarse lat/lon box enclosing every point within *radius_km*.

        Used to pre-filter the working set before the exact distance check.
        Near the poles the longitude span degenerates to the full range.
        """
        angular = radius_km / EARTH_RADIUS_KM
        lat = math.radians(self.latitude)

        min_lat = math.degrees(lat - angular)
        max_lat = math.degrees(lat + angular)

        if min_lat <= -90.0 or max_lat >= 90.0 or angular >= math.pi / 2:
            return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), -180.0, 180.0)

        ratio = math.sin(angular) / math.cos(lat)
        if ratio >= 1.0:
            return BoundingBox(min_lat, max_lat, -180.0, 180.0)

        delta_lon = math.degrees(math.asin(ratio))
        if self.longitude - delta_lon < -180.0 or self.longitude + delta_lon > 180.0:
            # Box crosses the antimeridian
            return BoundingBox(min_lat, max_lat, -180.0, 180.0)

        return BoundingBox(
            min_latitude=min_lat,
            max_latitude=max_lat,
            min_longitude=self.longitude - delta_lon,
            max_longitude=self.longitude + delta_lon,
        )
