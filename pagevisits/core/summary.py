# ==============================================================================
# Summary Aggregator - Pure Domain Logic
# ==============================================================================
"""
Global analytics summary over a full list of page visits.

Produces:
- Distinct counts of users, pages and sessions (raw equality)
- Top pages by visit count
- A dense daily histogram for the window ending today
- Top referrers by visit count, with absent referrers counted as "Direct"

Every call is a full recompute. The only input besides the visits is the
"today" anchor of the daily histogram, which callers may inject for
deterministic results.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from pagevisits.core.models import (
    AnalyticsSummary,
    DailyVisits,
    ReferrerCount,
    TopPage,
    VisitEvent,
)
from pagevisits.core.policy import DEFAULT_POLICY, AggregationPolicy

logger = logging.getLogger(__name__)


def _rank(counts: Counter, limit: int) -> list[tuple[str, int]]:
    """Sort counted keys descending; ties keep first-encountered order."""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]


def _top_pages(visits: list[VisitEvent], limit: int) -> list[TopPage]:
    counts = Counter(visit.page_url for visit in visits)
    # Iterating in reverse leaves the first title seen for each URL
    titles = {visit.page_url: visit.page_title for visit in reversed(visits)}
    return [
        TopPage(url=url, title=titles[url], visits=count) for url, count in _rank(counts, limit)
    ]


def _top_referrers(visits: list[VisitEvent], policy: AggregationPolicy) -> list[ReferrerCount]:
    counts = Counter(policy.referrer_label(visit.referrer) for visit in visits)
    return [
        ReferrerCount(source=source, visits=count)
        for source, count in _rank(counts, policy.top_referrers_limit)
    ]


def _calendar_day(visit: VisitEvent, tz: tzinfo | None) -> date | None:
    instant = visit.visit_time
    if instant is None:
        logger.debug(
            "Skipping visit %s in daily histogram: invalid date %r", visit.id, visit.visited_at
        )
        return None
    try:
        return instant.astimezone(tz).date()
    except OverflowError:
        logger.debug(
            "Skipping visit %s in daily histogram: date out of range in calendar %r",
            visit.id,
            visit.visited_at,
        )
        return None


def _visits_by_day(
    visits: list[VisitEvent], today: date, tz: tzinfo | None, window_days: int
) -> list[DailyVisits]:
    days = [today - timedelta(days=offset) for offset in range(window_days - 1, -1, -1)]
    counts = Counter(
        day for day in (_calendar_day(visit, tz) for visit in visits) if day is not None
    )
    return [DailyVisits(day=day, visits=counts.get(day, 0)) for day in days]


def compute_summary(
    visits: Iterable[VisitEvent],
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
    policy: AggregationPolicy = DEFAULT_POLICY,
) -> AnalyticsSummary:
    """
    Compute the global analytics summary.

    Args:
        visits: All page visits
        today: Last day of the daily histogram. Defaults to the current
            date in tz.
        tz: Calendar used to assign visits to days. None means the local
            time zone.
        policy: Ranking sizes, window length and labels

    Returns:
        AnalyticsSummary. total_visits counts every visit, including those
        whose date cannot be parsed.
    """
    visits = list(visits)
    if today is None:
        today = datetime.now(tz).date()
    elif isinstance(today, datetime):
        today = today.date()

    return AnalyticsSummary(
        total_visits=len(visits),
        unique_users=len({visit.email for visit in visits}),
        unique_pages=len({visit.page_url for visit in visits}),
        unique_sessions=len({visit.session_id for visit in visits}),
        top_pages=_top_pages(visits, policy.top_pages_limit),
        visits_by_day=_visits_by_day(visits, today, tz, policy.daily_window_days),
        referrer_data=_top_referrers(visits, policy),
    )
