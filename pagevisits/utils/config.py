# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from datetime import tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagevisits.core.policy import (
    DAILY_WINDOW_DAYS,
    DIRECT_REFERRER_LABEL,
    OTHER_REFERRERS_LABEL,
    RECENT_VISITS_LIMIT,
    REFERRER_BUCKET_KEEP,
    REFERRER_BUCKET_THRESHOLD,
    TOP_PAGES_LIMIT,
    TOP_REFERRERS_LIMIT,
    AggregationPolicy,
)

# Load .env file before any settings are instantiated
load_dotenv()


class ApiSettings(BaseSettings):
    """Xano backend connection settings."""

    model_config = SettingsConfigDict(env_prefix="XANO_")

    base_url: str = Field(
        default="https://x8ki-letl-twmt.n7.xano.io/api:FGUScUBu",
        description="Xano API base URL",
    )
    endpoint: str = Field(default="/page_visits", description="Page visits collection endpoint")
    timeout_seconds: float = Field(default=30.0, description="HTTP request timeout in seconds")
    fallback_to_mock: bool = Field(
        default=True,
        description="Use generated mock visits when the API cannot be reached",
    )

    @property
    def page_visits_url(self) -> str:
        """Full URL of the page visits endpoint."""
        return f"{self.base_url.rstrip('/')}/{self.endpoint.lstrip('/')}"


class AnalyticsSettings(BaseSettings):
    """Aggregation policy settings.

    Ranking sizes, the daily window and the referrer bucketing rule are
    product choices; the defaults match the dashboard.
    """

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    top_pages_limit: int = Field(
        default=TOP_PAGES_LIMIT, ge=0, description="Pages in the top ranking"
    )
    top_referrers_limit: int = Field(
        default=TOP_REFERRERS_LIMIT, ge=0, description="Referrers in the top ranking"
    )
    daily_window_days: int = Field(
        default=DAILY_WINDOW_DAYS, ge=1, description="Days in the daily visit histogram"
    )
    referrer_bucket_threshold: int = Field(
        default=REFERRER_BUCKET_THRESHOLD,
        ge=0,
        description="Distinct referrers above which the long tail is merged",
    )
    referrer_bucket_keep: int = Field(
        default=REFERRER_BUCKET_KEEP,
        ge=0,
        description="Referrers kept before merging the long tail",
    )
    recent_visits_limit: int = Field(
        default=RECENT_VISITS_LIMIT, ge=0, description="Rows in the recent visits table"
    )
    direct_label: str = Field(default=DIRECT_REFERRER_LABEL, description="Label for no referrer")
    other_label: str = Field(default=OTHER_REFERRERS_LABEL, description="Label for merged tail")
    timezone: str = Field(
        default="", description="IANA time zone for daily buckets (empty for local time)"
    )

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        value = value.strip()
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown time zone: {value!r}") from e
        return value

    @property
    def tzinfo(self) -> tzinfo | None:
        """Configured time zone, or None for local time."""
        return ZoneInfo(self.timezone) if self.timezone else None

    def to_policy(self) -> AggregationPolicy:
        """Build the aggregation policy from these settings."""
        return AggregationPolicy(
            top_pages_limit=self.top_pages_limit,
            top_referrers_limit=self.top_referrers_limit,
            daily_window_days=self.daily_window_days,
            referrer_bucket_threshold=self.referrer_bucket_threshold,
            referrer_bucket_keep=self.referrer_bucket_keep,
            recent_visits_limit=self.recent_visits_limit,
            direct_label=self.direct_label,
            other_label=self.other_label,
        )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    api: ApiSettings = Field(default_factory=ApiSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="WARNING", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()


def describe_settings_error(error: ValidationError) -> str:
    """One-line summary of a settings validation error."""
    problems = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or error.title
        problems.append(f"{field}: {detail['msg']}")
    return "; ".join(problems)
