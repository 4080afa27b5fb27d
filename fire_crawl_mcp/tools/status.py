"""
Job status tools for asynchronous crawl and batch jobs.

Status checks report progress and the source URLs of pages processed so far.
They never return page content; use scrape or batch for that.
"""

import logging
from typing import Any
from urllib.parse import quote

from mcp import types
from pydantic import StrictStr

from ..core.client import ApiRequest
from .base import ToolArguments, ToolHandler

logger = logging.getLogger(__name__)

_JOB_ID_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "description": "Job ID returned when the job was started"},
    },
    "required": ["id"],
}

CRAWL_STATUS_TOOL = types.Tool(
    name="fire_crawl_crawl_status",
    description="Check the status of an asynchronous crawl job. Returns progress only, not page content.",
    inputSchema=_JOB_ID_SCHEMA,
)

BATCH_STATUS_TOOL = types.Tool(
    name="fire_crawl_batch_status",
    description="Check the status of a batch scrape job. Returns progress only, not page content.",
    inputSchema=_JOB_ID_SCHEMA,
)


class JobStatusArguments(ToolArguments):
    id: StrictStr


def build_crawl_status_request(arguments: JobStatusArguments) -> ApiRequest:
    return ApiRequest(method="GET", endpoint=f"/v1/crawl/{quote(arguments.id, safe='')}")


def build_batch_status_request(arguments: JobStatusArguments) -> ApiRequest:
    return ApiRequest(method="GET", endpoint=f"/v1/batch/scrape/{quote(arguments.id, safe='')}")


def _source_url(document: Any) -> str | None:
    if not isinstance(document, dict):
        return None
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    return metadata.get("sourceURL") or metadata.get("url") or document.get("url")


def format_job_status(kind: str, job_id: str, payload: dict[str, Any]) -> str:
    """
    Summarize a job status payload.

    Args:
        kind: "Crawl" or "Batch scrape"
        job_id: Job identifier
        payload: Decoded status payload

    Returns:
        str: Status summary, one fact per line
    """
    status = payload["status"]
    completed = payload.get("completed", 0)
    total = payload.get("total", 0)

    lines = [f"{kind} {job_id}: {status} ({completed}/{total} completed)"]
    if payload.get("creditsUsed") is not None:
        lines.append(f"Credits used: {payload['creditsUsed']}")
    if payload.get("expiresAt"):
        lines.append(f"Expires at: {payload['expiresAt']}")

    urls = [url for url in map(_source_url, payload.get("data") or []) if url]
    if urls:
        lines.append("Pages:")
        lines.extend(f"- {url}" for url in urls)

    logger.info(f"{kind} status for job {job_id}: status={status}, completed={completed}/{total}")
    return "\n".join(lines)


def map_crawl_status_payload(payload: dict[str, Any], arguments: JobStatusArguments) -> str:
    return format_job_status("Crawl", arguments.id, payload)


def map_batch_status_payload(payload: dict[str, Any], arguments: JobStatusArguments) -> str:
    return format_job_status("Batch scrape", arguments.id, payload)


CRAWL_STATUS_HANDLER = ToolHandler(
    definition=CRAWL_STATUS_TOOL,
    arguments_model=JobStatusArguments,
    build_request=build_crawl_status_request,
    map_payload=map_crawl_status_payload,
    expected_field="status",
    requires_success=False,
)

BATCH_STATUS_HANDLER = ToolHandler(
    definition=BATCH_STATUS_TOOL,
    arguments_model=JobStatusArguments,
    build_request=build_batch_status_request,
    map_payload=map_batch_status_payload,
    expected_field="status",
    requires_success=False,
)
