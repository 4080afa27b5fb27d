"""
Pytest configuration and shared fixtures for the FireCrawl MCP server tests.

Outbound HTTP is served by an in-process fake of the FireCrawl API built on
httpx.MockTransport; time is driven by a manual clock so rate-limit windows
are deterministic.
"""

import json
import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from fire_crawl_mcp.core.client import FireCrawlClient
from fire_crawl_mcp.core.rate_limit import FixedWindowRateLimiter
from fire_crawl_mcp.tools.dispatcher import ToolDispatcher

TEST_API_KEY = "test-api-key"

TEST_CONFIG = {
    "FIRE_CRAWL_API_KEY": TEST_API_KEY,
    "FIRE_CRAWL_API_URL": "https://api.firecrawl.dev",
    "FIRE_CRAWL_TIMEOUT": "30.0",
    "LOG_LEVEL": "DEBUG",
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFireCrawlApi:
    """
    Queue of canned responses served through httpx.MockTransport.

    Every request is recorded; an empty queue falls back to the default
    response, and with no default the request is treated as unexpected.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._queue: list[Callable[[httpx.Request], httpx.Response]] = []
        self._default: Callable[[httpx.Request], httpx.Response] | None = None
        self.transport = httpx.MockTransport(self._handle)

    def add_response(
        self,
        status_code: int = 200,
        json: Any = None,
        text: str | None = None,
        default: bool = False,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json)

        if default:
            self._default = respond
        else:
            self._queue.append(respond)

    def add_error(self, error: Exception) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise error

        self._queue.append(fail)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._queue:
            return self._queue.pop(0)(request)
        if self._default is not None:
            return self._default(request)
        raise AssertionError(f"Unexpected request: {request.method} {request.url}")

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_body(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def test_env() -> Generator[dict[str, str], None, None]:
    """Provide test environment variables."""
    with patch.dict(os.environ, TEST_CONFIG):
        yield TEST_CONFIG


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api() -> FakeFireCrawlApi:
    return FakeFireCrawlApi()


@pytest.fixture
def firecrawl_client(api: FakeFireCrawlApi) -> FireCrawlClient:
    return FireCrawlClient(
        api_key=TEST_API_KEY,
        api_url="https://api.firecrawl.dev",
        timeout=5.0,
        transport=api.transport,
    )


@pytest.fixture
def dispatcher(firecrawl_client: FireCrawlClient, clock: FakeClock) -> ToolDispatcher:
    """Dispatcher with ceilings high enough not to interfere with a test."""
    limiter = FixedWindowRateLimiter(per_second=100, per_minute=1000, clock=clock)
    return ToolDispatcher(firecrawl_client, rate_limiter=limiter)


@pytest.fixture
def default_limit_dispatcher(firecrawl_client: FireCrawlClient, clock: FakeClock) -> ToolDispatcher:
    """Dispatcher with the production ceilings (2/second, 60/minute)."""
    return ToolDispatcher(firecrawl_client, rate_limiter=FixedWindowRateLimiter(clock=clock))


@pytest.fixture
def sample_scrape_response() -> dict[str, Any]:
    """Sample scrape response for testing."""
    return {
        "success": True,
        "data": {
            "markdown": "# Example Domain\n\nThis domain is for use in illustrative examples.\n",
            "html": "<h1>Example Domain</h1>",
            "rawHtml": "<html><body><h1>Example Domain</h1></body></html>",
            "metadata": {
                "title": "Example Domain",
                "description": "Example page",
                "sourceURL": "https://example.com",
                "statusCode": 200,
            },
        },
    }


@pytest.fixture
def sample_map_response() -> dict[str, Any]:
    return {
        "success": True,
        "links": [
            "https://example.com/",
            "https://example.com/about",
            "https://example.com/blog",
        ],
    }


@pytest.fixture
def sample_batch_response() -> dict[str, Any]:
    return {
        "results": [
            {
                "url": "https://example1.com",
                "title": "Example 1",
                "markdown": "# Example 1\n\nContent 1",
            },
            {
                "url": "https://example2.com",
                "title": "Example 2",
                "markdown": "# Example 2\n\nContent 2",
            },
        ],
        "failed": [],
    }


@pytest.fixture
def sample_crawl_status_response() -> dict[str, Any]:
    return {
        "success": True,
        "status": "scraping",
        "total": 10,
        "completed": 2,
        "creditsUsed": 2,
        "expiresAt": "2024-12-31T23:59:59Z",
        "data": [
            {"markdown": "# Page 1", "metadata": {"sourceURL": "https://example.com/a"}},
            {"markdown": "# Page 2", "metadata": {"sourceURL": "https://example.com/b"}},
        ],
    }


def result_text(result) -> str:
    """Text of the single content block of a tool result."""
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    return result.content[0].text
