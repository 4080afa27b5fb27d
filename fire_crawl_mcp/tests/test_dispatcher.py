"""
Tests for ToolDispatcher: routing, the rate-limit checkpoint and error
conversion.
"""

import asyncio
import dataclasses

from fire_crawl_mcp.core.rate_limit import FixedWindowRateLimiter
from fire_crawl_mcp.tools.dispatcher import ToolDispatcher, error_result, text_result
from fire_crawl_mcp.tools.scrape import SCRAPE_HANDLER

from .conftest import result_text


class TestRouting:
    def test_list_tools(self, dispatcher):
        names = [tool.name for tool in dispatcher.list_tools()]

        assert names == [
            "fire_crawl_scrape",
            "fire_crawl_map",
            "fire_crawl_crawl",
            "fire_crawl_batch",
            "fire_crawl_crawl_status",
            "fire_crawl_batch_status",
        ]
        for tool in dispatcher.list_tools():
            assert tool.inputSchema["type"] == "object"
            assert tool.description

    def test_list_tools_does_not_consume_slots(self, default_limit_dispatcher):
        for _ in range(5):
            default_limit_dispatcher.list_tools()

        status = default_limit_dispatcher.rate_limiter.get_rate_limit_status()
        assert status["second"]["used"] == 0

    async def test_unknown_tool(self, dispatcher, api):
        result = await dispatcher.dispatch("unknown_tool", {"url": "https://example.com"})

        assert result.isError is True
        assert result_text(result) == "Error: Unknown tool: unknown_tool"
        assert api.requests == []
        assert dispatcher.rate_limiter.get_rate_limit_status()["minute"]["used"] == 0

    async def test_missing_arguments(self, dispatcher, api):
        result = await dispatcher.dispatch("fire_crawl_scrape", None)

        assert result.isError is True
        assert result_text(result) == "Error: No arguments provided"
        assert api.requests == []

    async def test_empty_arguments_are_validated(self, dispatcher, api):
        result = await dispatcher.dispatch("fire_crawl_scrape", {})

        assert result.isError is True
        assert result_text(result).startswith("Error: Invalid arguments for fire_crawl_scrape: url")

    async def test_unexpected_exception_becomes_error_result(self, firecrawl_client, api):
        def explode(arguments):
            raise RuntimeError("boom")

        handler = dataclasses.replace(SCRAPE_HANDLER, build_request=explode)
        dispatcher = ToolDispatcher(firecrawl_client, handlers=[handler])

        result = await dispatcher.dispatch("fire_crawl_scrape", {"url": "https://example.com"})

        assert result.isError is True
        assert result_text(result) == "Error: boom"
        assert api.requests == []


class TestRateLimitCheckpoint:
    async def test_burst_of_five(self, default_limit_dispatcher, api, sample_scrape_response):
        api.add_response(json=sample_scrape_response, default=True)

        results = await asyncio.gather(*[
            default_limit_dispatcher.dispatch("fire_crawl_scrape", {"url": "https://example.com"})
            for _ in range(5)
        ])

        succeeded = [r for r in results if not r.isError]
        rejected = [r for r in results if r.isError]
        assert len(succeeded) == 2
        assert len(rejected) == 3
        for result in rejected:
            assert result_text(result) == "Error: Rate limit exceeded"
        assert len(api.requests) == 2

    async def test_second_window_resets(self, default_limit_dispatcher, api, clock, sample_map_response):
        api.add_response(json=sample_map_response, default=True)
        args = {"url": "https://example.com"}

        assert not (await default_limit_dispatcher.dispatch("fire_crawl_map", args)).isError
        assert not (await default_limit_dispatcher.dispatch("fire_crawl_map", args)).isError
        assert (await default_limit_dispatcher.dispatch("fire_crawl_map", args)).isError

        clock.advance(1.01)
        assert not (await default_limit_dispatcher.dispatch("fire_crawl_map", args)).isError

    async def test_invalid_arguments_do_not_consume_slots(self, default_limit_dispatcher, api):
        for _ in range(3):
            result = await default_limit_dispatcher.dispatch("fire_crawl_scrape", {"url": 1})
            assert result_text(result).startswith("Error: Invalid arguments")

        status = default_limit_dispatcher.rate_limiter.get_rate_limit_status()
        assert status["second"]["used"] == 0
        assert api.requests == []

    async def test_upstream_failures_consume_slots(self, default_limit_dispatcher, api):
        api.add_response(status_code=500, text="Internal Server Error", default=True)

        await default_limit_dispatcher.dispatch("fire_crawl_scrape", {"url": "https://example.com"})
        await default_limit_dispatcher.dispatch("fire_crawl_scrape", {"url": "https://example.com"})

        status = default_limit_dispatcher.rate_limiter.get_rate_limit_status()
        assert status["second"]["used"] == 2
        assert status["minute"]["used"] == 2

    async def test_dispatchers_do_not_share_limits(self, firecrawl_client, api, clock, sample_map_response):
        api.add_response(json=sample_map_response, default=True)
        first = ToolDispatcher(firecrawl_client, FixedWindowRateLimiter(clock=clock))
        second = ToolDispatcher(firecrawl_client, FixedWindowRateLimiter(clock=clock))
        args = {"url": "https://example.com"}

        await first.dispatch("fire_crawl_map", args)
        await first.dispatch("fire_crawl_map", args)

        assert (await first.dispatch("fire_crawl_map", args)).isError
        assert not (await second.dispatch("fire_crawl_map", args)).isError


class TestResultHelpers:
    def test_text_result(self):
        result = text_result("hello")
        assert result.isError is False
        assert result_text(result) == "hello"

    def test_error_result(self):
        result = error_result(ValueError("bad"))
        assert result.isError is True
        assert result_text(result) == "Error: bad"
