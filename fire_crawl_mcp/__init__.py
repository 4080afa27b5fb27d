"""
FireCrawl MCP Server - a Model Context Protocol server for the FireCrawl web scraping API.

This package exposes FireCrawl scrape, map, crawl and batch operations, plus
job-status checks, as MCP tools.

Modules:
    - core: configuration, HTTP client, rate limiter and error types
    - tools: tool definitions, argument models, request builders, response mappers
    - middleware: tool-call logging
    - server: FastMCP server assembly and entry point
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
