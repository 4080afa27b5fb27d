"""
Batch scraping tool.

Sends a list of URLs with shared options to POST /v1/batch/scrape and joins
the markdown of every returned page. URLs reported in the payload's `failed`
list are not rendered in the result text; they are only logged.
"""

import logging
from typing import Any

from mcp import types
from pydantic import StrictStr

from ..core.client import ApiRequest
from ..core.exceptions import UpstreamSemanticError
from .base import FORMATS_SCHEMA, INVALID_RESPONSE, ToolArguments, ToolHandler

logger = logging.getLogger(__name__)

BATCH_TOOL = types.Tool(
    name="fire_crawl_batch",
    description=(
        "Scrape multiple URLs in one request with shared options. "
        "Returns the markdown of every successfully scraped page."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "urls": {
                "type": "array",
                "items": {"type": "string"},
                "description": "The URLs to scrape",
            },
            "options": {
                "type": "object",
                "properties": {
                    "formats": FORMATS_SCHEMA,
                    "onlyMainContent": {"type": "boolean"},
                    "parsePDF": {"type": "boolean"},
                    "javascript": {"type": "boolean"},
                    "timeout": {"type": "number"},
                },
                "description": "Scrape options applied to every URL",
            },
        },
        "required": ["urls"],
    },
)


class BatchArguments(ToolArguments):
    urls: list[StrictStr]
    options: dict[str, Any] | None = None


def build_batch_request(arguments: BatchArguments) -> ApiRequest:
    """Keep `urls` top-level and fold every other option under `options`."""
    options = dict(arguments.model_extra or {})
    if arguments.options:
        options.update(arguments.options)

    body: dict[str, Any] = {"urls": list(arguments.urls)}
    if options:
        body["options"] = options
    return ApiRequest(method="POST", endpoint="/v1/batch/scrape", body=body)


def map_batch_payload(payload: dict[str, Any], arguments: BatchArguments) -> str:
    results = payload["results"]
    if not isinstance(results, list):
        raise UpstreamSemanticError(INVALID_RESPONSE)

    failed = payload.get("failed") or []
    if failed:
        logger.warning(f"Batch scrape dropped {len(failed)} failed URL(s): {failed}")

    logger.info(f"Batch scrape completed: {len(results)}/{len(arguments.urls)} URLs returned content")
    return "\n\n".join(
        result.get("markdown") or "" for result in results if isinstance(result, dict)
    )


BATCH_HANDLER = ToolHandler(
    definition=BATCH_TOOL,
    arguments_model=BatchArguments,
    build_request=build_batch_request,
    map_payload=map_batch_payload,
    expected_field="results",
    requires_success=False,
)
