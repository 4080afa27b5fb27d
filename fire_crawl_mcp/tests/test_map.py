"""
Tests for the fire_crawl_map tool.
"""

import pytest

from fire_crawl_mcp.core.exceptions import InvalidArgumentsError
from fire_crawl_mcp.tools.map import MAP_HANDLER, MapArguments, build_map_request

from .conftest import result_text


class TestMapTools:
    """Test suite for URL discovery."""

    def test_request_forwards_options(self):
        arguments = {
            "url": "https://example.com",
            "search": "blog",
            "ignoreSitemap": True,
            "includeSubdomains": False,
            "limit": 50,
        }
        request = build_map_request(MapArguments.model_validate(arguments))

        assert request.method == "POST"
        assert request.endpoint == "/v1/map"
        assert request.body == arguments

    def test_limit_must_be_a_number(self):
        with pytest.raises(InvalidArgumentsError, match="limit"):
            MAP_HANDLER.validate({"url": "https://example.com", "limit": "10"})

    async def test_map_success(self, dispatcher, api, sample_map_response):
        api.add_response(json=sample_map_response)

        result = await dispatcher.dispatch("fire_crawl_map", {"url": "https://example.com"})

        assert result.isError is False
        assert result_text(result) == (
            "https://example.com/\nhttps://example.com/about\nhttps://example.com/blog"
        )
        assert str(api.last_request.url) == "https://api.firecrawl.dev/v1/map"

    async def test_map_empty_links(self, dispatcher, api):
        api.add_response(json={"success": True, "links": []})

        result = await dispatcher.dispatch("fire_crawl_map", {"url": "https://example.com"})

        assert result.isError is False
        assert result_text(result) == ""

    async def test_map_missing_links(self, dispatcher, api):
        api.add_response(json={"success": True})

        result = await dispatcher.dispatch("fire_crawl_map", {"url": "https://example.com"})

        assert result.isError is True
        assert result_text(result) == "Error: Invalid response from FireCrawl API"

    async def test_map_success_flag_missing(self, dispatcher, api):
        api.add_response(json={"links": ["https://example.com/"]})

        result = await dispatcher.dispatch("fire_crawl_map", {"url": "https://example.com"})

        assert result.isError is True
        assert result_text(result) == "Error: Invalid response from FireCrawl API"

    async def test_map_links_must_be_a_list(self, dispatcher, api):
        api.add_response(json={"success": True, "links": "https://a.com"})

        result = await dispatcher.dispatch("fire_crawl_map", {"url": "https://example.com"})

        assert result.isError is True
        assert result_text(result) == "Error: Invalid response from FireCrawl API"

    async def test_map_http_error(self, dispatcher, api):
        api.add_response(status_code=401, text='{"error":"Unauthorized"}')

        result = await dispatcher.dispatch("fire_crawl_map", {"url": "https://example.com"})

        assert result_text(result) == 'FireCrawl API error: 401 Unauthorized\n{"error":"Unauthorized"}'

    async def test_map_mapping_is_idempotent(self, sample_map_response):
        args = MapArguments(url="https://example.com")
        assert MAP_HANDLER.map_payload(sample_map_response, args) == MAP_HANDLER.map_payload(
            sample_map_response, args
        )
