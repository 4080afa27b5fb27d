"""
Tool dispatcher for the FireCrawl MCP server.

A call moves through validation, the rate-limit checkpoint, the outbound
request and response mapping. Every failure ends the call with an error
result; nothing is retried and no per-call error escapes dispatch().
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from mcp import types

from ..core.client import FireCrawlClient
from ..core.exceptions import UnknownToolError, mcp_log_error, to_error_text
from ..core.rate_limit import FixedWindowRateLimiter
from .base import ToolHandler
from .batch import BATCH_HANDLER
from .crawl import CRAWL_HANDLER
from .map import MAP_HANDLER
from .scrape import SCRAPE_HANDLER
from .status import BATCH_STATUS_HANDLER, CRAWL_STATUS_HANDLER

logger = logging.getLogger(__name__)

DEFAULT_HANDLERS: tuple[ToolHandler, ...] = (
    SCRAPE_HANDLER,
    MAP_HANDLER,
    CRAWL_HANDLER,
    BATCH_HANDLER,
    CRAWL_STATUS_HANDLER,
    BATCH_STATUS_HANDLER,
)


def text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def error_result(error: Exception) -> types.CallToolResult:
    return text_result(to_error_text(error), is_error=True)


class ToolDispatcher:
    """
    Routes tool calls by name to their handler.

    The rate limiter is owned by the dispatcher instance, so separate servers
    (or tests) never share counters.
    """

    def __init__(
        self,
        client: FireCrawlClient,
        rate_limiter: FixedWindowRateLimiter | None = None,
        handlers: Iterable[ToolHandler] = DEFAULT_HANDLERS,
    ):
        self.client = client
        self.rate_limiter = rate_limiter or FixedWindowRateLimiter()
        self._handlers: dict[str, ToolHandler] = {handler.name: handler for handler in handlers}

    @property
    def handlers(self) -> Mapping[str, ToolHandler]:
        return self._handlers

    def list_tools(self) -> list[types.Tool]:
        """Return the static tool definitions. No rate limiting applies."""
        return [handler.definition for handler in self._handlers.values()]

    async def dispatch(
        self, name: str, arguments: dict[str, Any] | None
    ) -> types.CallToolResult:
        """
        Run one tool call to completion.

        Args:
            name: Tool name
            arguments: Raw argument bag from the host

        Returns:
            CallToolResult: One text block, isError set on any failure
        """
        handler = self._handlers.get(name)
        if handler is None:
            error = UnknownToolError(f"Unknown tool: {name}")
            mcp_log_error(error, {"tool": name})
            return error_result(error)

        if arguments is None:
            logger.warning(f"Tool {name} called without arguments")
            return text_result("Error: No arguments provided", is_error=True)

        try:
            parsed = handler.validate(arguments)
            self.rate_limiter.check_and_consume()
            request = handler.build_request(parsed)
            response = await self.client.send(request)
            text = handler.map_response(response, parsed)
        except Exception as e:
            mcp_log_error(e, {"tool": name})
            return error_result(e)

        return text_result(text)
