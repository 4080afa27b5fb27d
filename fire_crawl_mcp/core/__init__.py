"""
Core utilities for the FireCrawl MCP server.

- Environment-based configuration
- HTTP client for the FireCrawl REST API
- Fixed-window rate limiter
- Error types and error-text rendering
"""

from .client import ApiRequest, FireCrawlClient, get_firecrawl_client
from .config import (
    get_api_key,
    get_api_url,
    get_env_bool,
    get_env_float,
    get_env_int,
    get_request_timeout,
    get_server_info,
    load_environment,
    validate_environment,
)
from .exceptions import (
    FireCrawlError,
    InvalidArgumentsError,
    MissingConfigurationError,
    RateLimitExceededError,
    TransportError,
    UnknownToolError,
    UpstreamHttpError,
    UpstreamSemanticError,
    create_tool_error,
    mcp_log_error,
    to_error_text,
)
from .rate_limit import (
    REQUESTS_PER_MINUTE,
    REQUESTS_PER_SECOND,
    FixedWindow,
    FixedWindowRateLimiter,
)

__all__ = [
    "REQUESTS_PER_MINUTE",
    "REQUESTS_PER_SECOND",
    "ApiRequest",
    "FireCrawlClient",
    "FireCrawlError",
    "FixedWindow",
    "FixedWindowRateLimiter",
    "InvalidArgumentsError",
    "MissingConfigurationError",
    "RateLimitExceededError",
    "TransportError",
    "UnknownToolError",
    "UpstreamHttpError",
    "UpstreamSemanticError",
    "create_tool_error",
    "get_api_key",
    "get_api_url",
    "get_env_bool",
    "get_env_float",
    "get_env_int",
    "get_firecrawl_client",
    "get_request_timeout",
    "get_server_info",
    "load_environment",
    "mcp_log_error",
    "to_error_text",
    "validate_environment",
]
