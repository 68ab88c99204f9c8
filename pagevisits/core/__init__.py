# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Pure domain logic with no external dependencies beyond Pydantic.

This module contains:
- Date normalization for heterogeneous timestamp encodings
- Domain models (VisitEvent, AnalyticsSummary, UserProfile, UserDetail)
- Aggregators (summary, user roster, user detail)
- AnalyticsSnapshot bundling a visit list with its derived views

All code here is framework-agnostic and easily unit-testable.
"""

from pagevisits.core.dates import (
    InvalidDateError,
    classify_raw_date,
    parse_date,
    safe_parse_date,
)
from pagevisits.core.models import (
    AnalyticsSummary,
    DailyVisits,
    PageCount,
    ReferrerCount,
    ReferrerShare,
    TopPage,
    UserDetail,
    UserProfile,
    VisitEvent,
)
from pagevisits.core.policy import DEFAULT_POLICY, AggregationPolicy
from pagevisits.core.snapshot import AnalyticsSnapshot
from pagevisits.core.summary import compute_summary
from pagevisits.core.user_detail import compute_user_detail
from pagevisits.core.users import compute_users, filter_by_identity, lookup_user

__all__ = [
    # Dates
    "InvalidDateError",
    "classify_raw_date",
    "parse_date",
    "safe_parse_date",
    # Models
    "AnalyticsSummary",
    "DailyVisits",
    "PageCount",
    "ReferrerCount",
    "ReferrerShare",
    "TopPage",
    "UserDetail",
    "UserProfile",
    "VisitEvent",
    # Policy
    "AggregationPolicy",
    "DEFAULT_POLICY",
    # Aggregators
    "AnalyticsSnapshot",
    "compute_summary",
    "compute_user_detail",
    "compute_users",
    "filter_by_identity",
    "lookup_user",
]
