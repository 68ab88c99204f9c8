# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the page visits CLI.
"""

import json
from typing import Annotated

import typer

from pagevisits.cli.shared import C, load_settings


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration."""
    settings = load_settings(json_output)
    api = settings.api
    analytics = settings.analytics

    if json_output:
        config = {
            "api": {
                "base_url": api.base_url,
                "endpoint": api.endpoint,
                "url": api.page_visits_url,
                "timeout_seconds": api.timeout_seconds,
                "fallback_to_mock": api.fallback_to_mock,
            },
            "analytics": analytics.model_dump(),
            "log_level": settings.log_level,
            "debug": settings.debug,
        }
        print(json.dumps(config, indent=2))
        return

    # Human-readable output
    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    print(f"{C.CYAN}API{C.RESET}")
    print(f"  URL:        {C.WHITE}{api.page_visits_url}{C.RESET}")
    print(f"  Timeout:    {C.WHITE}{api.timeout_seconds:g}s{C.RESET}")
    fallback = "mock data" if api.fallback_to_mock else "disabled"
    print(f"  Fallback:   {C.WHITE}{fallback}{C.RESET}")
    print()

    print(f"{C.CYAN}Analytics{C.RESET}")
    print(f"  Top pages:      {C.WHITE}{analytics.top_pages_limit}{C.RESET}")
    print(f"  Top referrers:  {C.WHITE}{analytics.top_referrers_limit}{C.RESET}")
    print(f"  Daily window:   {C.WHITE}{analytics.daily_window_days} days{C.RESET}")
    print(f"  Recent visits:  {C.WHITE}{analytics.recent_visits_limit}{C.RESET}")
    bucketing = (
        f"keep {analytics.referrer_bucket_keep} when more than "
        f"{analytics.referrer_bucket_threshold} sources"
    )
    print(f"  Referrer tail:  {C.WHITE}{bucketing}{C.RESET}")
    print(f"  Time zone:      {C.WHITE}{analytics.timezone or 'local'}{C.RESET}")
    print()

    print(f"{C.CYAN}Logging{C.RESET}")
    print(f"  Level:      {C.WHITE}{settings.log_level}{C.RESET}")
    print()
