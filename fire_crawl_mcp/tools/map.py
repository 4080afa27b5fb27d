"""
Website URL discovery tool.

Forwards the arguments to POST /v1/map and lists the discovered links, one
per line.
"""

import logging
from typing import Any

from mcp import types
from pydantic import StrictBool, StrictStr

from ..core.client import ApiRequest
from ..core.exceptions import UpstreamSemanticError
from .base import INVALID_RESPONSE, Number, ToolArguments, ToolHandler

logger = logging.getLogger(__name__)

MAP_TOOL = types.Tool(
    name="fire_crawl_map",
    description="Discover URLs from a starting point. Can use both sitemap.xml and HTML link discovery.",
    inputSchema={
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "Starting URL for URL discovery"},
            "search": {"type": "string", "description": "Optional search term to filter URLs"},
            "ignoreSitemap": {
                "type": "boolean",
                "description": "Skip sitemap.xml discovery and only use HTML links",
            },
            "sitemapOnly": {
                "type": "boolean",
                "description": "Only use sitemap.xml for discovery, ignore HTML links",
            },
            "includeSubdomains": {
                "type": "boolean",
                "description": "Include URLs from subdomains in results",
            },
            "limit": {"type": "number", "description": "Maximum number of URLs to return"},
        },
        "required": ["url"],
    },
)


class MapArguments(ToolArguments):
    url: StrictStr
    search: StrictStr | None = None
    ignore_sitemap: StrictBool | None = None
    sitemap_only: StrictBool | None = None
    include_subdomains: StrictBool | None = None
    limit: Number | None = None


def build_map_request(arguments: MapArguments) -> ApiRequest:
    return ApiRequest(method="POST", endpoint="/v1/map", body=arguments.to_body())


def map_map_payload(payload: dict[str, Any], arguments: MapArguments) -> str:
    if not isinstance(payload["links"], list):
        raise UpstreamSemanticError(INVALID_RESPONSE)

    links = [str(link) for link in payload["links"]]
    logger.info(f"Mapping completed for {arguments.url}: discovered={len(links)} URLs")
    return "\n".join(links)


MAP_HANDLER = ToolHandler(
    definition=MAP_TOOL,
    arguments_model=MapArguments,
    build_request=build_map_request,
    map_payload=map_map_payload,
    expected_field="links",
)
