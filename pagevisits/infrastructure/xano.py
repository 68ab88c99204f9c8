# ==============================================================================
# Xano Backend Client
# ==============================================================================
"""
HTTP client for the page visits collection hosted on Xano.

Transient network errors (connection failures, timeouts) are retried with
exponential backoff. When the backend stays unreachable, fetch_page_visits()
can fall back to generated mock visits so callers always get a full list.
"""

import logging

import requests

from pagevisits.core.models import VisitEvent
from pagevisits.infrastructure.mock_data import generate_mock_visits
from pagevisits.infrastructure.records import SourceError, extract_records, parse_visit_records
from pagevisits.utils.config import ApiSettings, Settings, get_settings
from pagevisits.utils.retry import HTTP_RETRY_EXCEPTIONS, RETRY_WAIT_MIN, retry_light

logger = logging.getLogger(__name__)


class XanoClient:
    """
    Client for the Xano page visits endpoint.

    Usage:
        with XanoClient() as client:
            visits = client.get_page_visits()
    """

    def __init__(
        self,
        settings: ApiSettings | None = None,
        session: requests.Session | None = None,
        retry_wait: float = RETRY_WAIT_MIN,
    ):
        """
        Initialize the client.

        Args:
            settings: API settings. If None, loads from get_settings().
            session: requests session to use (a new one by default)
            retry_wait: Minimum backoff between retries in seconds
        """
        self._settings = settings or get_settings().api
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        self._get_json = retry_light(HTTP_RETRY_EXCEPTIONS, logger, wait_min=retry_wait)(
            self._request
        )

    def _request(self, url: str):
        logger.info("API Request: GET %s", url)
        response = self._session.get(url, timeout=self._settings.timeout_seconds)
        logger.info("API Response: %d %s", response.status_code, response.reason)
        response.raise_for_status()
        return response.json()

    def get_page_visits(self) -> list[VisitEvent]:
        """
        Fetch all page visits.

        Returns:
            Parsed visits (malformed records are skipped)

        Raises:
            SourceError: On HTTP errors, invalid JSON, or network errors
                that persist after retries
        """
        url = self._settings.page_visits_url
        try:
            payload = self._get_json(url)
        except requests.exceptions.RequestException as e:
            raise SourceError(f"Failed to fetch page visits from {url}: {e}") from e
        except ValueError as e:
            raise SourceError(f"Invalid JSON from {url}: {e}") from e

        return parse_visit_records(extract_records(payload))

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "XanoClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def fetch_page_visits(
    settings: Settings | None = None,
    client: XanoClient | None = None,
) -> list[VisitEvent]:
    """
    Fetch page visits, falling back to mock data if enabled.

    Args:
        settings: Application settings. If None, loads from get_settings().
        client: Client to use (a new XanoClient by default)

    Returns:
        Visits from the backend, or generated mock visits when the backend
        fails and api.fallback_to_mock is set

    Raises:
        SourceError: If the backend fails and fallback is disabled
    """
    settings = settings or get_settings()
    owns_client = client is None
    client = client or XanoClient(settings.api)

    try:
        return client.get_page_visits()
    except SourceError as e:
        if not settings.api.fallback_to_mock:
            raise
        logger.warning("Error fetching page visits: %s", e)
        logger.warning("Returning mock data")
        return generate_mock_visits()
    finally:
        if owns_client:
            client.close()
