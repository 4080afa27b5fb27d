"""
Single-page scraping tool.

Forwards the arguments to POST /v1/scrape and returns the best available
content field of the scraped document.
"""

import logging
from typing import Any

from mcp import types
from pydantic import Field, StrictBool, StrictStr

from ..core.client import ApiRequest
from ..core.exceptions import UpstreamSemanticError
from .base import FORMATS_SCHEMA, NO_CONTENT, Number, ToolArguments, ToolHandler

logger = logging.getLogger(__name__)

CONTENT_PRIORITY = ("markdown", "html", "rawHtml")

SCRAPE_TOOL = types.Tool(
    name="fire_crawl_scrape",
    description=(
        "Scrape a single webpage with advanced options for content extraction. "
        "Supports various formats including markdown, HTML, and screenshots. "
        "Can execute custom actions like clicking or scrolling before scraping."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "The URL to scrape"},
            "formats": {
                **FORMATS_SCHEMA,
                "description": "Content formats to extract (default: ['markdown'])",
            },
            "onlyMainContent": {
                "type": "boolean",
                "description": "Extract only the main content, filtering out navigation, footers, etc.",
            },
            "includeTags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "HTML tags to specifically include in extraction",
            },
            "excludeTags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "HTML tags to exclude from extraction",
            },
            "waitFor": {
                "type": "number",
                "description": "Time in milliseconds to wait for dynamic content to load",
            },
            "timeout": {
                "type": "number",
                "description": "Maximum time in milliseconds to wait for the page to load",
            },
            "parsePDF": {
                "type": "boolean",
                "description": "Parse PDF documents into text",
            },
            "waitForSelector": {
                "type": "string",
                "description": "CSS selector to wait for before scraping",
            },
            "javascript": {
                "type": "boolean",
                "description": "Render JavaScript before scraping",
            },
            "actions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "type": {
                            "type": "string",
                            "enum": ["wait", "click", "scroll", "type", "select"],
                            "description": "Type of action to perform",
                        },
                        "selector": {"type": "string", "description": "CSS selector for the target element"},
                        "milliseconds": {"type": "number", "description": "Time to wait in milliseconds (for wait action)"},
                        "text": {"type": "string", "description": "Text to type (for type action)"},
                        "value": {"type": "string", "description": "Value to select (for select action)"},
                        "x": {"type": "number", "description": "X coordinate for scroll"},
                        "y": {"type": "number", "description": "Y coordinate for scroll"},
                        "behavior": {
                            "type": "string",
                            "enum": ["smooth", "auto"],
                            "description": "Scroll behavior",
                        },
                    },
                    "required": ["type"],
                },
                "description": "List of actions to perform before scraping",
            },
            "extract": {
                "type": "object",
                "properties": {
                    "schema": {"type": "object", "description": "Schema for structured data extraction"},
                    "systemPrompt": {"type": "string", "description": "System prompt for LLM extraction"},
                    "prompt": {"type": "string", "description": "User prompt for LLM extraction"},
                },
                "description": "Configuration for structured data extraction",
            },
        },
        "required": ["url"],
    },
)


class ScrapeArguments(ToolArguments):
    url: StrictStr
    formats: list[StrictStr] | None = None
    only_main_content: StrictBool | None = None
    include_tags: list[StrictStr] | None = None
    exclude_tags: list[StrictStr] | None = None
    wait_for: Number | None = None
    timeout: Number | None = None
    parse_pdf: StrictBool | None = Field(default=None, alias="parsePDF")
    wait_for_selector: StrictStr | None = None
    javascript: StrictBool | None = None
    actions: list[dict[str, Any]] | None = None
    extract: dict[str, Any] | None = None


def build_scrape_request(arguments: ScrapeArguments) -> ApiRequest:
    return ApiRequest(method="POST", endpoint="/v1/scrape", body=arguments.to_body())


def map_scrape_payload(payload: dict[str, Any], arguments: ScrapeArguments) -> str:
    """Pick markdown, then html, then rawHtml from the scraped document."""
    document = payload["data"]
    if not isinstance(document, dict):
        raise UpstreamSemanticError(NO_CONTENT)

    for field in CONTENT_PRIORITY:
        content = document.get(field)
        if isinstance(content, str) and content:
            logger.info(f"Scrape completed for {arguments.url}, {field} length: {len(content)}")
            return content.strip()

    raise UpstreamSemanticError(NO_CONTENT)


SCRAPE_HANDLER = ToolHandler(
    definition=SCRAPE_TOOL,
    arguments_model=ScrapeArguments,
    build_request=build_scrape_request,
    map_payload=map_scrape_payload,
    expected_field="data",
)
