# ==============================================================================
# Visit Record Parsing
# ==============================================================================
"""
Turning backend payloads and JSON exports into VisitEvent lists.

The backend does not always answer with the same shape:
- A JSON array of records
- An object with an "items" array (paginated collections)
- A single record object

extract_records() normalizes all three; parse_visit_records() validates
each record and skips the ones that do not fit the VisitEvent model.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pagevisits.core.models import VisitEvent

logger = logging.getLogger(__name__)

# Keys that identify a bare object as a single visit record
SINGLE_RECORD_FIELDS = ["id", "email", "page_url"]


class SourceError(RuntimeError):
    """Raised when page visits cannot be fetched or read."""


def extract_records(payload: Any) -> list[dict]:
    """
    Extract the list of visit records from a response payload.

    Args:
        payload: Decoded JSON (list, object with "items", or single record)

    Returns:
        List of record dicts; empty if the payload has no recognizable records
    """
    if isinstance(payload, list):
        logger.info("Response is an array with %d items", len(payload))
        return payload

    if isinstance(payload, dict):
        items = payload.get("items")
        if isinstance(items, list):
            logger.info("Response contains items array with %d items", len(items))
            return items
        if all(payload.get(k) for k in SINGLE_RECORD_FIELDS):
            return [payload]
        logger.warning("Response is an object but does not contain an items array")
        return []

    logger.warning("Unexpected response payload type: %s", type(payload).__name__)
    return []


def parse_visit_records(records: list) -> list[VisitEvent]:
    """
    Validate raw records into VisitEvent models.

    Records that are not objects or fail validation are skipped.

    Args:
        records: Raw record dicts

    Returns:
        Parsed visits, in input order
    """
    visits = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping record %d: not an object", index)
            continue
        try:
            visits.append(VisitEvent.model_validate(record))
        except ValidationError as e:
            logger.warning(
                "Skipping record %d (id=%r): %d validation errors",
                index,
                record.get("id"),
                e.error_count(),
            )

    if not visits:
        logger.warning("No page visits in payload")
    else:
        logger.debug("First record fields: %s", sorted(visits[0].model_fields_set))
    return visits


def load_visits_file(path: Path) -> list[VisitEvent]:
    """
    Load page visits from a JSON export.

    The file may hold any payload shape accepted by extract_records().

    Raises:
        SourceError: If the file cannot be read or is not valid JSON
    """
    try:
        payload = json.loads(Path(path).read_text())
    except OSError as e:
        raise SourceError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SourceError(f"Invalid JSON in {path}: {e}") from e

    logger.info("Loaded visits file %s", path)
    return parse_visit_records(extract_records(payload))
