"""Coverage scan and price suggestion endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.application.use_cases.geo_scan import GeoScanUseCase
from app.application.use_cases.pricing import SuggestPriceUseCase
from app.domain.value_objects.enums import UrgencyLevel
from app.domain.value_objects.geo_point import GeoPoint
from app.infrastructure.api.dependencies import get_geo_scan_uc, get_suggest_price_uc

router = APIRouter(tags=["geo"])


@router.get("/geo-scan")
async def geo_scan(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    radius_km: float = Query(default=10.0, gt=0, le=100),
    service_category: str | None = None,
    uc: GeoScanUseCase = Depends(get_geo_scan_uc),
):
    """Available professionals around a point, bucketed by distance."""
    report = await uc.execute(
        GeoPoint(latitude=latitude, longitude=longitude), radius_km, service_category
    )
    return {
        "center": {"latitude": latitude, "longitude": longitude},
        "radius_km": radius_km,
        "total_scanned": report.scanned,
        "in_radius": report.in_radius,
        "by_distance": report.by_distance,
        "professionals": [
            {
                "id": e.professional_id,
                "name": e.name,
                "distance_km": e.distance_km,
                "specialty_match": e.specialty_match,
                "latitude": e.location.latitude,
                "longitude": e.location.longitude,
            }
            for e in report.professionals
        ],
    }


@router.get("/pricing/suggest")
async def suggest_price(
    urgency_level: UrgencyLevel = UrgencyLevel.HIGH,
    service_category: str | None = None,
    base_price: float | None = Query(default=None, ge=0),
    uc: SuggestPriceUseCase = Depends(get_suggest_price_uc),
):
    price = await uc.execute(service_category, urgency_level, base_price)
    return {
        "service_category": service_category,
        "urgency_level": urgency_level.value,
        "suggested_price": price,
    }
