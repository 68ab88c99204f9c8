# ==============================================================================
# Page Visit Analytics Utilities
# ==============================================================================
"""
Shared utilities for the page visit analytics toolkit.

This module exports configuration and retry helpers for use throughout the
package.
"""

from pagevisits.utils.config import (
    AnalyticsSettings,
    ApiSettings,
    Settings,
    describe_settings_error,
    get_settings,
)
from pagevisits.utils.retry import (
    HTTP_RETRY_EXCEPTIONS,
    retry_light,
)

__all__ = [
    # Config
    "AnalyticsSettings",
    "ApiSettings",
    "Settings",
    "describe_settings_error",
    "get_settings",
    # Retry
    "HTTP_RETRY_EXCEPTIONS",
    "retry_light",
]
