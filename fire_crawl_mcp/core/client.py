"""
HTTP client for the FireCrawl REST API.

A new httpx.AsyncClient is opened for every request and closed as soon as the
response has been read, so nothing is pooled between tool calls.
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin, urlparse

import httpx

from .config import get_api_key, get_api_url, get_request_timeout
from .exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiRequest:
    """One outbound call: method, endpoint relative to the API base URL, JSON body."""

    method: str
    endpoint: str
    body: dict[str, Any] | None = None


class FireCrawlClient:
    """Sends ApiRequests to FireCrawl with bearer authentication."""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.firecrawl.dev",
        timeout: float | None = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: FireCrawl API key sent as a bearer token
            api_url: Base URL of the FireCrawl API
            timeout: Per-request timeout in seconds, None disables it
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_key = api_key
        self.api_url = self._normalize_base_url(api_url)
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def _normalize_base_url(api_url: str) -> str:
        """Ensure the base API URL includes a scheme and host."""
        if not api_url:
            raise ValueError("API URL cannot be empty")

        parsed = urlparse(api_url)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return api_url.rstrip("/")

        # Bare host such as "localhost:3002" or "api.example.com/base"
        if not parsed.netloc and "://" not in api_url and not api_url.startswith("/"):
            host = api_url.split("/", 1)[0]
            scheme = "http" if host.startswith(("localhost", "127.", "0.0.0.0")) else "https"
            return f"{scheme}://{api_url}".rstrip("/")

        raise ValueError(f"Invalid API URL '{api_url}': expected absolute URL with scheme")

    def _build_url(self, endpoint: str) -> str:
        return urljoin(f"{self.api_url}/", endpoint.lstrip("/"))

    def _prepare_headers(self) -> dict[str, str]:
        """Prepare headers for API requests."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def send(self, request: ApiRequest) -> httpx.Response:
        """
        Perform one HTTP call.

        Args:
            request: The request to send

        Returns:
            httpx.Response: The fully read response, whatever its status

        Raises:
            TransportError: If the request could not be completed
        """
        url = self._build_url(request.endpoint)
        logger.debug(f"{request.method} {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
                response = await http.request(
                    request.method,
                    url,
                    headers=self._prepare_headers(),
                    json=request.body,
                )
        except httpx.HTTPError as e:
            message = str(e) or type(e).__name__
            logger.warning(f"{request.method} {url} failed: {message}")
            raise TransportError(message) from e

        logger.debug(f"{request.method} {url} -> {response.status_code}")
        return response


def get_firecrawl_client(
    api_key: str | None = None,
    api_url: str | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FireCrawlClient:
    """
    Create a FireCrawl client, reading unset values from environment variables.

    Args:
        api_key: API key, FIRE_CRAWL_API_KEY when omitted
        api_url: Base URL, FIRE_CRAWL_API_URL when omitted
        timeout: Timeout in seconds, FIRE_CRAWL_TIMEOUT when omitted
        transport: Optional httpx transport override

    Returns:
        FireCrawlClient: Configured client

    Raises:
        MissingConfigurationError: If FIRE_CRAWL_API_KEY is not set
    """
    client = FireCrawlClient(
        api_key=api_key or get_api_key(),
        api_url=api_url or get_api_url(),
        timeout=timeout if timeout is not None else get_request_timeout(),
        transport=transport,
    )
    logger.debug(f"Created FireCrawl client for {client.api_url}")
    return client
