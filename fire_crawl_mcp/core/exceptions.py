"""
Error types for the FireCrawl MCP server.

Every per-call failure is raised as a FireCrawlError subclass inside the
dispatcher and rendered into a uniform text result at the tool-call boundary.
Only MissingConfigurationError is allowed to stop the process.
"""

import logging
from typing import Any

from fastmcp.exceptions import ToolError

logger = logging.getLogger(__name__)


class FireCrawlError(Exception):
    """Base class for all FireCrawl MCP server errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MissingConfigurationError(FireCrawlError):
    """A required configuration value (the API key) is absent."""


class InvalidArgumentsError(FireCrawlError):
    """The argument bag does not match the tool's declared shape."""


class RateLimitExceededError(FireCrawlError):
    """A rate-limit window is full."""


class UnknownToolError(FireCrawlError):
    """No tool is registered under the requested name."""


class UpstreamHttpError(FireCrawlError):
    """The FireCrawl API answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, body: str):
        super().__init__(
            f"FireCrawl API error: {status_code} {reason}\n{body}",
            details={"status_code": status_code, "reason": reason},
        )
        self.status_code = status_code
        self.reason = reason
        self.body = body


class UpstreamSemanticError(FireCrawlError):
    """The FireCrawl API answered 2xx but the payload reports failure or is incomplete."""


class TransportError(FireCrawlError):
    """The HTTP request itself failed (timeout, DNS, connection reset...)."""


def to_error_text(error: Exception) -> str:
    """
    Render an error into the text shown to the host.

    Upstream HTTP failures keep their own "FireCrawl API error:" prefix,
    everything else is prefixed with "Error: ".

    Args:
        error: The error raised while handling a tool call

    Returns:
        Human-readable error text
    """
    if isinstance(error, UpstreamHttpError):
        return error.message
    if isinstance(error, FireCrawlError):
        return f"Error: {error.message}"
    return f"Error: {error}"


def create_tool_error(message: str) -> ToolError:
    """
    Create a FastMCP ToolError carrying the rendered error text.

    FastMCP reports ToolError messages verbatim with isError set.

    Args:
        message: Error text as produced by to_error_text

    Returns:
        ToolError: FastMCP-compatible error
    """
    return ToolError(message)


def mcp_log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Log an error with context information.

    Expected per-call failures are logged as warnings, anything else with a
    traceback.

    Args:
        error: The error to log
        context: Additional context information
    """
    context = dict(context or {})
    if isinstance(error, FireCrawlError):
        context.update(error.details)

    log_message = f"{type(error).__name__}: {error}"
    if context:
        context_info = ", ".join(f"{k}={v}" for k, v in context.items())
        log_message = f"{log_message} (Context: {context_info})"

    if isinstance(error, (FireCrawlError, ToolError)):
        logger.warning(log_message)
    else:
        logger.error(log_message, exc_info=error)
