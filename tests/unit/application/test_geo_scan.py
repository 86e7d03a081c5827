"""Tests for the coverage geo scan."""

from __future__ import annotations

import pytest

from app.application.use_cases.geo_scan import GeoScanUseCase, bucket_for
from fakes import BA_CENTER, FakeDirectory, professional


def test_bucket_boundaries():
    assert bucket_for(0.0) == "0-2km"
    assert bucket_for(2.0) == "0-2km"
    assert bucket_for(4.9) == "2-5km"
    assert bucket_for(10.0) == "5-10km"
    assert bucket_for(10.1) == "10km+"


@pytest.mark.asyncio
async def test_scan_buckets_and_flags_specialty():
    directory = FakeDirectory(
        [
            professional(1, km=1.0),
            professional(2, km=3.0, specialties=("Electricista",)),
            professional(3, km=7.0),
            professional(4, km=12.0),
            professional(5, km=40.0),
        ]
    )

    report = await GeoScanUseCase(directory).execute(BA_CENTER, 15.0, "plomeria")

    assert report.in_radius == 4
    assert report.by_distance == {"0-2km": 1, "2-5km": 1, "5-10km": 1, "10km+": 1}
    assert [e.professional_id for e in report.professionals] == [1, 2, 3, 4]
    assert [e.specialty_match for e in report.professionals] == [True, False, True, True]
