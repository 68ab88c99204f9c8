# ==============================================================================
# Analytics Snapshot
# ==============================================================================
"""
Immutable bundle of raw visits and the views computed from them.

A snapshot is built once per fetched visit list. Summary and roster are
computed eagerly; user detail views are computed on demand. Replacing the
visit list means building a new snapshot.
"""

from collections.abc import Iterable
from datetime import date, tzinfo

from pydantic import BaseModel, Field

from pagevisits.core.models import (
    AnalyticsSummary,
    UserDetail,
    UserProfile,
    VisitEvent,
)
from pagevisits.core.policy import DEFAULT_POLICY, AggregationPolicy
from pagevisits.core.summary import compute_summary
from pagevisits.core.user_detail import compute_user_detail
from pagevisits.core.users import compute_users, filter_by_identity, lookup_user


class AnalyticsSnapshot(BaseModel):
    """Visits plus the summary and roster derived from them."""

    visits: list[VisitEvent] = Field(default_factory=list)
    summary: AnalyticsSummary = Field(default_factory=AnalyticsSummary)
    users: list[UserProfile] = Field(default_factory=list)
    policy: AggregationPolicy = Field(default=DEFAULT_POLICY, exclude=True)

    model_config = {"frozen": True}

    @classmethod
    def from_visits(
        cls,
        visits: Iterable[VisitEvent],
        *,
        today: date | None = None,
        tz: tzinfo | None = None,
        policy: AggregationPolicy = DEFAULT_POLICY,
    ) -> "AnalyticsSnapshot":
        """Aggregate a visit list into a new snapshot."""
        visits = list(visits)
        return cls(
            visits=visits,
            summary=compute_summary(visits, today=today, tz=tz, policy=policy),
            users=compute_users(visits),
            policy=policy,
        )

    def recent_visits(self) -> list[VisitEvent]:
        """The first visits of the list as received, up to the policy limit."""
        return self.visits[: self.policy.recent_visits_limit]

    def get_user(self, email: str) -> UserProfile | None:
        """Roster entry for an identity, or None."""
        return lookup_user(self.users, email)

    def get_user_visits(self, email: str) -> list[VisitEvent]:
        """All visits recorded for an identity."""
        return filter_by_identity(self.visits, email)

    def get_user_detail(self, email: str) -> UserDetail | None:
        """Detail view for an identity, or None if it is not in the roster."""
        if self.get_user(email) is None:
            return None
        return compute_user_detail(self.get_user_visits(email), policy=self.policy)
