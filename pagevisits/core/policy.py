# ==============================================================================
# Aggregation Policy
# ==============================================================================
"""
Product policy constants for the aggregators.

Ranking sizes, the daily histogram window, the recent visits table size
and the referrer long-tail bucketing rule are product choices, so they live
here as named constants and can be overridden per call through an
AggregationPolicy.
"""

from pydantic import BaseModel, Field

TOP_PAGES_LIMIT = 5
TOP_REFERRERS_LIMIT = 5
DAILY_WINDOW_DAYS = 30
RECENT_VISITS_LIMIT = 10

# More than REFERRER_BUCKET_THRESHOLD distinct sources in a user detail view
# keeps the top REFERRER_BUCKET_KEEP and merges the rest
REFERRER_BUCKET_THRESHOLD = 6
REFERRER_BUCKET_KEEP = 5

DIRECT_REFERRER_LABEL = "Direct"
OTHER_REFERRERS_LABEL = "Other Sources"


class AggregationPolicy(BaseModel):
    """Tunable limits and labels used by the aggregators."""

    top_pages_limit: int = Field(default=TOP_PAGES_LIMIT, ge=0)
    top_referrers_limit: int = Field(default=TOP_REFERRERS_LIMIT, ge=0)
    daily_window_days: int = Field(default=DAILY_WINDOW_DAYS, ge=1)
    recent_visits_limit: int = Field(default=RECENT_VISITS_LIMIT, ge=0)
    referrer_bucket_threshold: int = Field(default=REFERRER_BUCKET_THRESHOLD, ge=0)
    referrer_bucket_keep: int = Field(default=REFERRER_BUCKET_KEEP, ge=0)
    direct_label: str = DIRECT_REFERRER_LABEL
    other_label: str = OTHER_REFERRERS_LABEL

    model_config = {"frozen": True}

    def referrer_label(self, referrer: str | None) -> str:
        """Label for a raw referrer; absent or empty means direct traffic."""
        return referrer or self.direct_label


DEFAULT_POLICY = AggregationPolicy()
