# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for the page visits analytics toolkit.

Commands are organized into separate modules for maintainability:
- shared.py: Common utilities, constants, and helpers
- summary.py: Analytics summary
- users.py: User roster and user profile
- config.py: Configuration display
"""

from pagevisits.cli.shared import (
    # Constants
    BOX_WIDTH,
    # Classes
    Box,
    Colors,
    Icons,
    # Aliases
    B,
    C,
    I,
    # Helpers
    fail,
    format_instant,
    load_snapshot,
    load_visits,
    truncate,
)

__all__ = [
    # Constants
    "BOX_WIDTH",
    # Classes
    "Box",
    "Colors",
    "Icons",
    # Aliases
    "B",
    "C",
    "I",
    # Helpers
    "fail",
    "format_instant",
    "load_snapshot",
    "load_visits",
    "truncate",
]
