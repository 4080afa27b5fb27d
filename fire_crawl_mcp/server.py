"""
FireCrawl MCP Server - FastMCP server assembly and entry point.

Tools are registered as thin FastMCP adapters around ToolDispatcher: FastMCP
owns the transport and the tools/list and tools/call plumbing, the dispatcher
owns validation, rate limiting and the FireCrawl round trip.
"""

import logging
import os
import sys
from typing import Any

import httpx
from fastmcp import FastMCP
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import ToolAnnotations
from pydantic import Field

from . import __version__
from .core.client import get_firecrawl_client
from .core.config import get_env_bool, get_env_int, load_environment
from .core.exceptions import MissingConfigurationError, create_tool_error
from .core.rate_limit import FixedWindowRateLimiter
from .middleware.logging import ToolCallLoggingMiddleware
from .tools.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "fire-crawl"

INSTRUCTIONS = """
This server exposes the FireCrawl web scraping API.

AVAILABLE TOOLS:
• fire_crawl_scrape - scrape one page (markdown, falling back to html/rawHtml)
• fire_crawl_batch - scrape several known URLs with shared options
• fire_crawl_map - discover URLs from a starting page
• fire_crawl_crawl - start an asynchronous crawl, returns a job id
• fire_crawl_crawl_status / fire_crawl_batch_status - check job progress

Outbound calls are limited to 2 per second and 60 per minute. Calls over the
limit fail immediately with "Error: Rate limit exceeded"; wait and try again.
""".strip()


class DispatchedTool(Tool):
    """FastMCP tool that hands the raw argument bag to the dispatcher."""

    dispatcher: Any = Field(exclude=True)

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        result = await self.dispatcher.dispatch(self.name, arguments)
        if result.isError:
            # FastMCP reports ToolError text verbatim with isError set
            raise create_tool_error(result.content[0].text)
        return ToolResult(content=result.content)


def register_fire_crawl_tools(mcp: FastMCP, dispatcher: ToolDispatcher) -> list[str]:
    """Register one FastMCP tool per dispatcher handler."""
    names = []
    for definition in dispatcher.list_tools():
        mcp.add_tool(
            DispatchedTool(
                name=definition.name,
                description=definition.description,
                parameters=definition.inputSchema,
                annotations=ToolAnnotations(
                    readOnlyHint=definition.name.endswith("_status"),
                    destructiveHint=False,
                    openWorldHint=True,
                ),
                dispatcher=dispatcher,
            )
        )
        names.append(definition.name)

    logger.info(f"Registered FireCrawl tools: {', '.join(names)}")
    return names


def create_server(
    api_key: str | None = None,
    api_url: str | None = None,
    timeout: float | None = None,
    rate_limiter: FixedWindowRateLimiter | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
    log_file: str | None = None,
    include_payloads: bool = False,
) -> FastMCP:
    """
    Build the FireCrawl MCP server.

    Args:
        api_key: FireCrawl API key, read from FIRE_CRAWL_API_KEY when omitted
        api_url: FireCrawl base URL, read from FIRE_CRAWL_API_URL when omitted
        timeout: HTTP timeout in seconds, read from FIRE_CRAWL_TIMEOUT when omitted
        rate_limiter: Limiter owned by this server, a fresh one when omitted
        http_transport: Optional httpx transport for the outbound client
        log_file: Optional rotating log file for tool-call records
        include_payloads: Log masked tool arguments

    Returns:
        FastMCP: Server with all FireCrawl tools registered

    Raises:
        MissingConfigurationError: If no API key is available
    """
    client = get_firecrawl_client(
        api_key=api_key, api_url=api_url, timeout=timeout, transport=http_transport
    )
    dispatcher = ToolDispatcher(client, rate_limiter=rate_limiter)

    # Schema mismatches reach the dispatcher, which reports them as invalid arguments
    mcp = FastMCP(
        name=SERVER_NAME,
        instructions=INSTRUCTIONS,
        version=__version__,
        strict_input_validation=False,
    )
    mcp.add_middleware(
        ToolCallLoggingMiddleware(include_payloads=include_payloads, log_file=log_file)
    )
    register_fire_crawl_tools(mcp, dispatcher)
    return mcp


def close_server(mcp: FastMCP) -> None:
    """Release the tool-call log file held by the logging middleware."""
    for middleware in mcp.middleware:
        if isinstance(middleware, ToolCallLoggingMiddleware):
            middleware.close()


def main() -> None:
    """Run the server with the transport selected by FIRE_CRAWL_TRANSPORT."""
    load_environment()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        mcp = create_server(
            log_file=os.getenv("FIRE_CRAWL_LOG_FILE"),
            include_payloads=get_env_bool("FIRE_CRAWL_LOG_PAYLOADS"),
        )
    except (MissingConfigurationError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    transport = os.getenv("FIRE_CRAWL_TRANSPORT", "stdio")
    try:
        if transport == "http":
            host = os.getenv("FIRE_CRAWL_HOST", "127.0.0.1")
            port = get_env_int("FIRE_CRAWL_PORT", 5100)
            logger.info(f"FireCrawl MCP Server running on http://{host}:{port}")
            mcp.run(transport="http", host=host, port=port)
        else:
            logger.info("FireCrawl MCP Server running on stdio")
            mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    finally:
        close_server(mcp)


if __name__ == "__main__":
    main()
