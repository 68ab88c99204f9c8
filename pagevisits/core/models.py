# ==============================================================================
# Page Visit Domain Models
# ==============================================================================
"""
Pydantic models for page visit events and the views derived from them.

These models are used for:
- Validating visit records returned by the backend or read from JSON exports
- Carrying aggregation results (summary, user roster, user detail)
- Serializing results for JSON output

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from pagevisits.core.dates import RawDateValue, safe_parse_date


class VisitEvent(BaseModel):
    """
    Represents a single page visit record from the backend.

    Attributes:
        id: Opaque record identifier
        email: Identity the visit belongs to (not validated as an email)
        page_url: URL of the visited page
        page_title: Title of the visited page
        visited_at: When the visit happened (epoch seconds, epoch ms or ISO string)
        session_id: Browsing session identifier
        referrer: Referring URL, None for direct traffic
        created_at: When the record was created (same encodings as visited_at)
    """

    id: int | str | None = Field(None, description="Record identifier")
    email: str | None = Field(None, description="Visitor identity")
    page_url: str = Field("", description="Visited page URL")
    page_title: str = Field("", description="Visited page title")
    visited_at: RawDateValue = Field(None, description="Visit time, raw encoding")
    session_id: str | None = Field(None, description="Session identifier")
    referrer: str | None = Field(None, description="Referring URL (nullable)")
    created_at: RawDateValue = Field(None, description="Creation time, raw encoding")

    model_config = {"frozen": True}

    @field_validator("page_url", "page_title", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @property
    def visit_time(self) -> datetime | None:
        """Normalized visit instant, or None if visited_at is absent or invalid."""
        return safe_parse_date(self.visited_at)


# ==============================================================================
# Analytics Summary
# ==============================================================================


class TopPage(BaseModel):
    """A page ranked by visit count."""

    url: str
    title: str
    visits: int

    model_config = {"frozen": True}


class DailyVisits(BaseModel):
    """Visit count for one calendar day."""

    day: date
    visits: int

    model_config = {"frozen": True}


class ReferrerCount(BaseModel):
    """A referring source ranked by visit count."""

    source: str
    visits: int

    model_config = {"frozen": True}


class AnalyticsSummary(BaseModel):
    """
    Global statistics over all page visits.

    Attributes:
        total_visits: Number of visit records
        unique_users: Distinct identities
        unique_pages: Distinct page URLs
        unique_sessions: Distinct session identifiers
        top_pages: Most visited pages, descending
        visits_by_day: One entry per day of the window, ascending, zero-filled
        referrer_data: Most common referrers, descending
    """

    total_visits: int = 0
    unique_users: int = 0
    unique_pages: int = 0
    unique_sessions: int = 0
    top_pages: list[TopPage] = Field(default_factory=list)
    visits_by_day: list[DailyVisits] = Field(default_factory=list)
    referrer_data: list[ReferrerCount] = Field(default_factory=list)

    model_config = {"frozen": True}


# ==============================================================================
# Users
# ==============================================================================


class UserProfile(BaseModel):
    """
    Per-identity aggregate built from that identity's visits.

    first_visit and last_visit keep the raw encoding of the chosen visit;
    the choice itself is made on normalized instants.
    """

    email: str
    visit_count: int
    first_visit: RawDateValue
    last_visit: RawDateValue
    sessions: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def session_count(self) -> int:
        """Number of distinct sessions."""
        return len(self.sessions)


class PageCount(BaseModel):
    """Visits to one page by a single user."""

    page: str
    count: int

    model_config = {"frozen": True}


class ReferrerShare(BaseModel):
    """A referring source with its share of a user's visits."""

    source: str
    count: int
    percentage: int

    model_config = {"frozen": True}


class UserDetail(BaseModel):
    """
    On-demand breakdown of one user's visits.

    Attributes:
        pages: Page histogram, descending by count
        referrers: Referrer histogram with long-tail bucketing
        visits: Visit history, most recent first
    """

    pages: list[PageCount] = Field(default_factory=list)
    referrers: list[ReferrerShare] = Field(default_factory=list)
    visits: list[VisitEvent] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def total_visits(self) -> int:
        """Number of visits in the breakdown."""
        return len(self.visits)
