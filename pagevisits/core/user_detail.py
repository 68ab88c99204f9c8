# ==============================================================================
# User Detail Aggregator - Pure Domain Logic
# ==============================================================================
"""
On-demand breakdown of a single user's visits.

Input is the slice of visits for one identity (see filter_by_identity).
Produces the page histogram, the referrer histogram with long-tail
bucketing, and the visit history ordered most recent first.
"""

from collections import Counter
from collections.abc import Iterable

from pagevisits.core.dates import instant_sort_key
from pagevisits.core.models import PageCount, ReferrerShare, UserDetail, VisitEvent
from pagevisits.core.policy import DEFAULT_POLICY, AggregationPolicy


def _percentage(count: int, total: int) -> int:
    """round(100 * count / total), halves rounded up."""
    return (200 * count + total) // (2 * total)


def _page_counts(visits: list[VisitEvent]) -> list[PageCount]:
    counts = Counter(visit.page_url for visit in visits)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [PageCount(page=page, count=count) for page, count in ranked]


def _referrer_shares(visits: list[VisitEvent], policy: AggregationPolicy) -> list[ReferrerShare]:
    total = len(visits)
    counts = Counter(policy.referrer_label(visit.referrer) for visit in visits)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    if len(ranked) > policy.referrer_bucket_threshold:
        tail = sum(count for _, count in ranked[policy.referrer_bucket_keep :])
        ranked = ranked[: policy.referrer_bucket_keep]
        if tail > 0:
            ranked.append((policy.other_label, tail))

    return [
        ReferrerShare(source=source, count=count, percentage=_percentage(count, total))
        for source, count in ranked
    ]


def _history_key(visit: VisitEvent) -> tuple[int, float]:
    # Undated visits go last, in input order
    visit_time = visit.visit_time
    if visit_time is None:
        return (1, 0.0)
    return (0, -instant_sort_key(visit_time))


def compute_user_detail(
    visits: Iterable[VisitEvent],
    *,
    policy: AggregationPolicy = DEFAULT_POLICY,
) -> UserDetail:
    """
    Compute the detail view for one user.

    Args:
        visits: The user's visits (already filtered to one identity)
        policy: Referrer bucketing rule and labels

    Returns:
        UserDetail with page and referrer histograms sorted by count
        descending and the visit history sorted most recent first
    """
    visits = list(visits)
    return UserDetail(
        pages=_page_counts(visits),
        referrers=_referrer_shares(visits, policy),
        visits=sorted(visits, key=_history_key),
    )
