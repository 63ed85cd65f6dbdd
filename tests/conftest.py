"""Shared fixtures for choreclock tests."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from factories import make_utc_dt
import pytest


@pytest.fixture
def utc_tz() -> ZoneInfo:
    """Return UTC timezone."""
    return ZoneInfo("UTC")


@pytest.fixture
def new_york_tz() -> ZoneInfo:
    """Return America/New_York (DST starts 2026-03-08, ends 2026-11-01)."""
    return ZoneInfo("America/New_York")


@pytest.fixture
def now() -> datetime:
    """Tuesday 2026-03-10 13:00 UTC."""
    return make_utc_dt(2026, 3, 10, 13)
