"""Pytest configuration and shared fixtures."""

import os

# Set test environment variables before any imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("CATALOG_PATH", None)

from datetime import datetime, timedelta, timezone

import pytest

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
def now():
    """Fixed reference time for freshness calculations."""
    return NOW


@pytest.fixture
def make_item():
    """Factory for ContentItem with healthy defaults."""
    from trustbox.core import AgeRange, ContentItem, ContentStats, SecurityFlags

    def _make(item_id="item-1", age=(6, 9), days_old=1, **overrides):
        defaults = {
            "id": item_id,
            "title": f"Game {item_id}",
            "age_range": AgeRange(*age),
            "stats": ContentStats(likes=80, opens=100, reports=0, avg_play_time_minutes=60),
            "flags": SecurityFlags(content_moderated=True),
            "last_updated": NOW - timedelta(days=days_old),
        }
        defaults.update(overrides)
        return ContentItem(**defaults)

    return _make
