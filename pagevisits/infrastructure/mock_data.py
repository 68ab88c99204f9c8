# ==============================================================================
# Mock Page Visits
# ==============================================================================
"""
Synthetic page visits used when the backend cannot be reached.

The generated records satisfy the same field contract as real ones, so the
dashboard stays usable offline.
"""

import logging
import random
import string
from datetime import datetime, timedelta, timezone

from pagevisits.core.models import VisitEvent

logger = logging.getLogger(__name__)

MOCK_VISIT_COUNT = 50
MOCK_WINDOW_DAYS = 30

MOCK_EMAILS = ["user1@example.com", "user2@example.com", "user3@example.com"]
MOCK_PAGES = [
    ("/home", "Home Page"),
    ("/products", "Products Page"),
    ("/about", "About Us"),
    ("/contact", "Contact Us"),
]
MOCK_REFERRERS = [
    "https://google.com",
    "https://facebook.com",
    "https://twitter.com",
    "https://linkedin.com",
    None,
]

_TOKEN_ALPHABET = string.digits + string.ascii_lowercase


def _session_token(rng: random.Random) -> str:
    return "".join(rng.choice(_TOKEN_ALPHABET) for _ in range(8))


def generate_mock_visits(
    count: int = MOCK_VISIT_COUNT,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[VisitEvent]:
    """
    Generate random page visits spread over the last 30 days.

    Args:
        count: Number of visits to generate
        now: Reference time (defaults to the current UTC time)
        rng: Random source, for reproducible output

    Returns:
        Visits with ids 1..count and ISO-8601 visit times
    """
    logger.info("Creating %d mock page visits", count)
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    now_ms = int(now.timestamp() * 1000)

    visits = []
    for index in range(count):
        visited = (now - timedelta(days=rng.randrange(MOCK_WINDOW_DAYS))).isoformat()
        page_url, page_title = rng.choice(MOCK_PAGES)
        visits.append(
            VisitEvent(
                id=index + 1,
                email=rng.choice(MOCK_EMAILS),
                page_url=page_url,
                page_title=page_title,
                visited_at=visited,
                session_id=f"session_{now_ms}_{_session_token(rng)}",
                referrer=rng.choice(MOCK_REFERRERS),
                created_at=visited,
            )
        )
    return visits
