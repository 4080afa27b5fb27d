"""
FireCrawl MCP tools.

Available tools:
- fire_crawl_scrape: single URL scraping
- fire_crawl_map: URL discovery
- fire_crawl_crawl: asynchronous crawl start
- fire_crawl_batch: multi-URL scraping
- fire_crawl_crawl_status / fire_crawl_batch_status: job progress

Each tool is a ToolHandler; ToolDispatcher looks them up by name.
"""

from .base import ToolArguments, ToolHandler
from .batch import BATCH_HANDLER
from .crawl import CRAWL_HANDLER
from .dispatcher import DEFAULT_HANDLERS, ToolDispatcher, error_result, text_result
from .map import MAP_HANDLER
from .scrape import SCRAPE_HANDLER
from .status import BATCH_STATUS_HANDLER, CRAWL_STATUS_HANDLER

__all__ = [
    "BATCH_HANDLER",
    "BATCH_STATUS_HANDLER",
    "CRAWL_HANDLER",
    "CRAWL_STATUS_HANDLER",
    "DEFAULT_HANDLERS",
    "MAP_HANDLER",
    "SCRAPE_HANDLER",
    "ToolArguments",
    "ToolDispatcher",
    "ToolHandler",
    "error_result",
    "text_result",
]
