# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- A fixed "today" anchor and UTC calendar for deterministic daily buckets
- A VisitEvent factory with sensible defaults
- A 50-record sample covering three identities
- Clean settings cache per test
"""

import itertools
from datetime import date, datetime, timedelta, timezone

import pytest

from pagevisits.core.models import VisitEvent
from pagevisits.utils.config import get_settings

TODAY = date(2024, 6, 30)
NOON_TODAY = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch):
    """Settings are cached with lru_cache; reset them around every test."""
    monkeypatch.setenv("ANALYTICS_TIMEZONE", "UTC")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def today():
    return TODAY


@pytest.fixture()
def utc():
    return timezone.utc


@pytest.fixture()
def make_visit():
    """Factory for VisitEvent with defaults; ids auto-increment."""
    counter = itertools.count(1)

    def _make(**overrides) -> VisitEvent:
        fields = {
            "id": next(counter),
            "email": "alice@example.com",
            "page_url": "/home",
            "page_title": "Home Page",
            "visited_at": NOON_TODAY.isoformat(),
            "session_id": "s1",
            "referrer": None,
            "created_at": NOON_TODAY.isoformat(),
        }
        fields.update(overrides)
        return VisitEvent(**fields)

    return _make


@pytest.fixture()
def sample_visits(make_visit):
    """
    50 visits for three identities, mixing ISO strings, epoch seconds and
    epoch milliseconds, all within the last 10 days.

    alice: 25 visits, bob: 15 visits, carol: 10 visits.
    """
    emails = ["alice@example.com"] * 25 + ["bob@example.com"] * 15 + ["carol@example.com"] * 10
    pages = ["/home", "/products", "/about", "/contact"]
    referrers = ["https://google.com", "https://twitter.com", None]

    visits = []
    for index, email in enumerate(emails):
        instant = NOON_TODAY - timedelta(days=index % 10, minutes=index)
        encoding = index % 3
        if encoding == 0:
            visited_at = instant.isoformat()
        elif encoding == 1:
            visited_at = int(instant.timestamp())
        else:
            visited_at = str(int(instant.timestamp() * 1000))
        visits.append(
            make_visit(
                email=email,
                page_url=pages[index % len(pages)],
                page_title=pages[index % len(pages)].strip("/").title(),
                visited_at=visited_at,
                session_id=f"{email}-s{index % 4}",
                referrer=referrers[index % len(referrers)],
            )
        )
    return visits
