"""
Google Custom Search JSON API client.
"""

from typing import Any, Dict, List, Optional

import httpx

from site_api.handlers.utils.errors import DependencyError
from site_api.handlers.utils.observability import logger, tracer

CUSTOM_SEARCH_URL = 'https://www.googleapis.com/customsearch/v1'
MAX_RESULTS = 10
REQUEST_TIMEOUT_SECONDS = 10.0
CONNECT_RETRIES = 2


class GoogleSearchClient:
    """Runs web searches against a Programmable Search Engine."""

    def __init__(
        self,
        api_key: str,
        search_engine_id: str,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.search_engine_id = search_engine_id
        self.http_client = http_client or httpx.Client(
            timeout=REQUEST_TIMEOUT_SECONDS,
            transport=httpx.HTTPTransport(retries=CONNECT_RETRIES),
        )

    @tracer.capture_method
    def search(self, query: str, num: int = MAX_RESULTS) -> List[Dict[str, Any]]:
        """
        Search the web.

        Args:
            query: Search terms
            num: Number of results, at most 10

        Returns:
            The ``items`` of the response, empty when nothing matched

        Raises:
            DependencyError: If the request fails or returns a non-2xx status
        """
        params = {
            'key': self.api_key,
            'cx': self.search_engine_id,
            'q': query,
            'num': min(num, MAX_RESULTS),
        }
        try:
            response = self.http_client.get(CUSTOM_SEARCH_URL, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Google Search API error", extra={"status_code": e.response.status_code})
            raise DependencyError(f'Search request failed with status {e.response.status_code}', service_name='google-search') from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Google Search API error", extra={"error": str(e)})
            raise DependencyError('Search request failed', service_name='google-search') from e

        items = payload.get('items', []) if isinstance(payload, dict) else []
        tracer.put_annotation('search_result_count', len(items))
        return items
