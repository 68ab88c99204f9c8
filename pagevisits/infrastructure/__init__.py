# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters that supply page visits to the core aggregators.

This module contains:
- records.py - Payload shape normalization, record validation, JSON files
- xano.py - HTTP client for the Xano backend, with retry and mock fallback
- mock_data.py - Synthetic visits used when the backend is unreachable
"""

from pagevisits.infrastructure.mock_data import generate_mock_visits
from pagevisits.infrastructure.records import (
    SourceError,
    extract_records,
    load_visits_file,
    parse_visit_records,
)
from pagevisits.infrastructure.xano import XanoClient, fetch_page_visits

__all__ = [
    # Records
    "SourceError",
    "extract_records",
    "load_visits_file",
    "parse_visit_records",
    # Backend
    "XanoClient",
    "fetch_page_visits",
    # Mock data
    "generate_mock_visits",
]
