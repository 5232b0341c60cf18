"""Upstream advisory API client."""
import requests
from typing import Any, List, Dict
from abc import ABC, abstractmethod
import logging

from src.config import Config
from src.errors import FetchError

logger = logging.getLogger(__name__)


class BaseAdvisoryClient(ABC):
    """
    Abstract base class for advisory API clients.
    Subclasses describe the request and unwrap the response body.
    """

    def __init__(self, config: Config):
        self.config = config
        self.session = requests.Session()

    @abstractmethod
    def _build_request(self) -> tuple[str, dict, dict]:
        """
        Build the API request parameters.

        Returns:
            Tuple of (url, headers, params)
        """
        pass

    @abstractmethod
    def _parse_response(self, response_data: Any) -> List[Dict]:
        """Unwrap the response body into a list of advisory rows."""
        pass

    def fetch_advisories(self) -> List[Dict]:
        """
        Fetch the current upstream advisory batch.

        Returns:
            List of raw advisory rows

        Raises:
            FetchError: on transport, HTTP or response-shape failures
        """
        url, headers, params = self._build_request()

        try:
            response = self.session.get(
                url, params=params, headers=headers, timeout=self.config.REQUEST_TIMEOUT
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else 'unknown'
            logger.error(f"HTTP {status} fetching advisories: {e}")
            raise FetchError(f"HTTP error fetching advisories: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching advisories: {e}")
            raise FetchError(f"Error fetching advisories: {e}") from e

        try:
            response_data = response.json()
        except ValueError as e:
            logger.error(f"Advisory response is not valid JSON: {e}")
            raise FetchError(f"Advisory response is not valid JSON: {e}") from e

        rows = self._parse_response(response_data)
        logger.info(f"Fetched {len(rows)} advisory row(s)")
        return rows

    def close(self):
        """Release the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class PublicAdvisoryClient(BaseAdvisoryClient):
    """
    Client for the public advisories endpoint (no authentication).
    The endpoint answers with ``{"rows": [...]}``.
    """

    def _build_request(self) -> tuple[str, dict, dict]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"advisory-monitor/{self.config.VERSION}",
        }
        return self.config.ADVISORY_API_URL, headers, {}

    def _parse_response(self, response_data: Any) -> List[Dict]:
        """
        Validate the top-level response shape.

        Rows themselves are validated one by one during ingestion so that a
        single bad row does not discard the batch.
        """
        if not isinstance(response_data, dict):
            raise FetchError(f"Unexpected response format: {type(response_data).__name__}")

        rows = response_data.get('rows')
        if not isinstance(rows, list):
            raise FetchError("Advisory response has no 'rows' list")
        return rows


def get_advisory_client(config: Config) -> BaseAdvisoryClient:
    """
    Factory function to instantiate the advisory client.

    Returns:
        Instance of a BaseAdvisoryClient subclass
    """
    logger.info(f"Using public advisory endpoint: {config.ADVISORY_API_URL}")
    return PublicAdvisoryClient(config)
