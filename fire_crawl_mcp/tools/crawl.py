"""
Asynchronous website crawling tool.

POST /v1/crawl only starts the job; the result text carries the job id that
fire_crawl_crawl_status accepts.
"""

import logging
from typing import Any

from mcp import types
from pydantic import StrictBool, StrictStr

from ..core.client import ApiRequest
from .base import FORMATS_SCHEMA, Number, ToolArguments, ToolHandler

logger = logging.getLogger(__name__)

CRAWL_TOOL = types.Tool(
    name="fire_crawl_crawl",
    description=(
        "Start an asynchronous crawl of multiple pages from a starting URL. "
        "Supports depth control, path filtering, and webhook notifications."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "Starting URL for the crawl"},
            "excludePaths": {
                "type": "array",
                "items": {"type": "string"},
                "description": "URL paths to exclude from crawling",
            },
            "includePaths": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Only crawl these URL paths",
            },
            "maxDepth": {"type": "number", "description": "Maximum link depth to crawl"},
            "ignoreSitemap": {"type": "boolean", "description": "Skip sitemap.xml discovery"},
            "limit": {"type": "number", "description": "Maximum number of pages to crawl"},
            "allowBackwardLinks": {
                "type": "boolean",
                "description": "Allow crawling links that point to parent directories",
            },
            "allowExternalLinks": {
                "type": "boolean",
                "description": "Allow crawling links to external domains",
            },
            "webhook": {
                "type": "string",
                "description": "Webhook URL to notify when crawl is complete",
            },
            "scrapeOptions": {
                "type": "object",
                "properties": {
                    "formats": FORMATS_SCHEMA,
                    "onlyMainContent": {"type": "boolean"},
                    "includeTags": {"type": "array", "items": {"type": "string"}},
                    "excludeTags": {"type": "array", "items": {"type": "string"}},
                    "waitFor": {"type": "number"},
                },
                "description": "Options for scraping each page",
            },
        },
        "required": ["url"],
    },
)


class CrawlArguments(ToolArguments):
    url: StrictStr
    exclude_paths: list[StrictStr] | None = None
    include_paths: list[StrictStr] | None = None
    max_depth: Number | None = None
    ignore_sitemap: StrictBool | None = None
    limit: Number | None = None
    allow_backward_links: StrictBool | None = None
    allow_external_links: StrictBool | None = None
    webhook: StrictStr | None = None
    scrape_options: dict[str, Any] | None = None


def build_crawl_request(arguments: CrawlArguments) -> ApiRequest:
    return ApiRequest(method="POST", endpoint="/v1/crawl", body=arguments.to_body())


def map_crawl_payload(payload: dict[str, Any], arguments: CrawlArguments) -> str:
    job_id = payload["id"]
    url = payload.get("url") or arguments.url
    logger.info(f"Crawl job {job_id} started for {arguments.url}")
    return f"Started crawl {job_id} for {url}"


CRAWL_HANDLER = ToolHandler(
    definition=CRAWL_TOOL,
    arguments_model=CrawlArguments,
    build_request=build_crawl_request,
    map_payload=map_crawl_payload,
    expected_field="id",
)
