# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared utilities, constants, and helper functions used across CLI command modules.

This module provides:
- ANSI color codes and box-drawing characters
- Box drawing helpers for formatted output
- Loading visits (file or backend) and building an AnalyticsSnapshot
- Date and text formatting for display
"""

import json
import re
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from pagevisits.core.dates import RawDateValue, safe_parse_date
from pagevisits.core.models import VisitEvent
from pagevisits.core.snapshot import AnalyticsSnapshot
from pagevisits.infrastructure.records import SourceError, load_visits_file
from pagevisits.infrastructure.xano import fetch_page_visits
from pagevisits.utils.config import Settings, describe_settings_error, get_settings

# ==============================================================================
# Constants
# ==============================================================================

# Box drawing width (unified for all commands)
BOX_WIDTH = 68

DATE_FORMAT = "%b %d, %Y"
DATETIME_FORMAT = "%b %d, %Y %H:%M"


# ==============================================================================
# ANSI Colors and Box Drawing
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Colors
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Bright colors
    BRIGHT_RED = "\033[91m"


class Box:
    """Unicode box-drawing characters."""

    H = "─"  # horizontal
    V = "│"  # vertical
    TL = "┌"  # top-left
    TR = "┐"  # top-right
    BL = "└"  # bottom-left
    BR = "┘"  # bottom-right
    LT = "├"  # left-tee
    RT = "┤"  # right-tee


class Icons:
    """Status icons using Unicode symbols."""

    CROSS = "✗"


# Module-level aliases for convenience
C, B, I = Colors, Box, Icons

_ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visible_len(s: str) -> int:
    """Calculate visible length of string, ignoring ANSI escape codes."""
    return len(_ANSI_ESCAPE_PATTERN.sub("", s))


def _box_header(title: str, width: int = BOX_WIDTH) -> str:
    """Create a single-line box header."""
    inner_width = width - 2
    title_padded = f" {title} "
    left_bar = (inner_width - len(title_padded)) // 2
    right_bar = inner_width - left_bar - len(title_padded)
    return (
        f"{C.CYAN}{B.TL}{B.H * left_bar}{C.BOLD}{C.WHITE}{title_padded}"
        f"{C.RESET}{C.CYAN}{B.H * right_bar}{B.TR}{C.RESET}"
    )


def _section_header_plain(title: str, width: int = BOX_WIDTH) -> str:
    """Create a section header without icon."""
    inner_width = width - 2
    title_padded = f" {title} "
    bar_len = inner_width - len(title_padded) - 1  # -1 for the first H after LT
    return (
        f"{C.CYAN}{B.LT}{B.H}{C.BOLD}{title_padded}{C.RESET}{C.CYAN}{B.H * bar_len}{B.RT}{C.RESET}"
    )


def _box_line(content: str, width: int = BOX_WIDTH) -> str:
    """Create a line inside the box with proper padding to right border."""
    inner_width = width - 2
    padding = inner_width - _visible_len(content)
    return f"{C.CYAN}{B.V}{C.RESET}{content}{' ' * padding}{C.CYAN}{B.V}{C.RESET}"


def _empty_line(width: int = BOX_WIDTH) -> str:
    """Create an empty line inside the box."""
    return f"{C.CYAN}{B.V}{' ' * (width - 2)}{B.V}{C.RESET}"


def _box_bottom(width: int = BOX_WIDTH) -> str:
    """Create a box bottom border."""
    return f"{C.CYAN}{B.BL}{B.H * (width - 2)}{B.BR}{C.RESET}"


# ==============================================================================
# Formatting Helpers
# ==============================================================================


def truncate(text: str, width: int) -> str:
    """Shorten text to width characters, marking the cut with '...'."""
    if len(text) <= width:
        return text
    return text[: max(width - 3, 0)] + "..."


def format_instant(value: RawDateValue, fmt: str = DATE_FORMAT) -> str:
    """Format a raw date value for display, 'Unknown' if it cannot be parsed."""
    instant = safe_parse_date(value)
    if instant is None:
        return "Unknown"
    tz = get_settings().analytics.tzinfo
    try:
        return instant.astimezone(tz).strftime(fmt)
    except OverflowError:
        # Out of datetime range in the display zone; keep the original offset
        return instant.strftime(fmt)


def fail(message: str, json_output: bool = False) -> None:
    """Print an error message and exit with status 1."""
    if json_output:
        print(json.dumps({"error": message}))
    else:
        print(f"\n{C.BRIGHT_RED}{I.CROSS} {message}{C.RESET}\n")
    raise typer.Exit(1)


# ==============================================================================
# Data Loading
# ==============================================================================


def load_settings(json_output: bool = False) -> Settings:
    """Load the cached settings, exiting with a readable message if they are invalid."""
    try:
        return get_settings()
    except ValidationError as e:
        fail(f"Invalid configuration: {describe_settings_error(e)}", json_output)


def load_visits(file: Optional[Path], json_output: bool = False) -> list[VisitEvent]:
    """Load visits from a JSON export, or fetch them from the backend."""
    try:
        if file is not None:
            return load_visits_file(file)
        return fetch_page_visits()
    except SourceError as e:
        fail(str(e), json_output)


def load_snapshot(
    file: Optional[Path],
    today: Optional[date] = None,
    json_output: bool = False,
) -> AnalyticsSnapshot:
    """Load visits and aggregate them with the configured policy."""
    analytics = load_settings(json_output).analytics
    visits = load_visits(file, json_output)
    return AnalyticsSnapshot.from_visits(
        visits,
        today=today,
        tz=analytics.tzinfo,
        policy=analytics.to_policy(),
    )
