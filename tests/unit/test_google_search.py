"""
Unit tests for the Google Custom Search client.

Requests are answered by an ``httpx.MockTransport`` so no network is used.
"""

import httpx
import pytest

from site_api.dal.google_search import CUSTOM_SEARCH_URL, GoogleSearchClient
from site_api.handlers.utils.errors import DependencyError

ITEMS = [
    {"title": "Result one", "link": "https://example.com/1", "snippet": "First"},
    {"title": "Result two", "link": "https://example.com/2", "snippet": "Second"},
]


def make_client(handler):
    return GoogleSearchClient(
        api_key="google-test-key",
        search_engine_id="engine-123",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestGoogleSearchClient:
    """Test cases for GoogleSearchClient."""

    def test_search_returns_items(self):
        """Test that the response items are returned as is."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"kind": "customsearch#search", "items": ITEMS})

        results = make_client(handler).search("lambda cold starts")

        assert results == ITEMS
        request = requests[0]
        assert str(request.url).startswith(CUSTOM_SEARCH_URL)
        assert request.url.params["key"] == "google-test-key"
        assert request.url.params["cx"] == "engine-123"
        assert request.url.params["q"] == "lambda cold starts"
        assert request.url.params["num"] == "10"

    def test_num_capped_at_ten(self):
        """Test that more than ten results are never requested."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"items": []})

        make_client(handler).search("query", num=50)

        assert requests[0].url.params["num"] == "10"

    def test_no_items(self):
        """Test that a response without items yields an empty list."""
        client = make_client(lambda request: httpx.Response(200, json={"kind": "customsearch#search"}))

        assert client.search("nothing matches") == []

    @pytest.mark.parametrize("status_code", [400, 403, 429, 500])
    def test_error_status(self, status_code):
        """Test that non-2xx responses become dependency errors."""
        client = make_client(lambda request: httpx.Response(status_code, json={"error": {"code": status_code}}))

        with pytest.raises(DependencyError) as exc_info:
            client.search("query")

        assert exc_info.value.service_name == "google-search"
        assert str(status_code) in exc_info.value.message

    def test_transport_error(self):
        """Test that connection failures become dependency errors."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DependencyError):
            make_client(handler).search("query")

    def test_invalid_json(self):
        """Test that an unparseable body becomes a dependency error."""
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(DependencyError):
            client.search("query")
