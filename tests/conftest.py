"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest


@pytest.fixture
def now():
    return datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    return lambda: now
