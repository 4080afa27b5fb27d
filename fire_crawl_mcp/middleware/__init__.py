"""
Middleware for the FireCrawl MCP server.

- logging: tool-call logging with sensitive value masking and rotating files

Rate limiting is not a middleware: it runs inside the dispatcher, after
argument validation, so rejected calls never consume a slot.
"""

from .logging import RotatingFileHandler, ToolCallLoggingMiddleware, mask_sensitive_dict

__all__ = [
    "RotatingFileHandler",
    "ToolCallLoggingMiddleware",
    "mask_sensitive_dict",
]
