"""DispatchPolicy — the numbers that drive candidate selection."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class DispatchPolicy:
    dispatch_radius_km: float = 15.0
    redispatch_radius_km: float = 20.0
    max_candidates: int = 5
    min_live_candidates: int = 3
    finder_limit: int = 10
    availability_window: timedelta = timedelta(hours=24)
    availability_fail_open: bool = True
    escrow_release_after: timedelta = timedelta(hours=24)
    offer_ttl: timedelta = timedelta(minutes=10)
    nearby_lookback: timedelta = timedelta(hours=24)
