"""
Shared building blocks for FireCrawl tools.

Each tool is described by a ToolHandler: its MCP definition, a pydantic model
that parses the raw argument bag, a request builder and a payload mapper.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

import httpx
from mcp import types
from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, ValidationError
from pydantic.alias_generators import to_camel

from ..core.client import ApiRequest
from ..core.exceptions import (
    InvalidArgumentsError,
    UpstreamHttpError,
    UpstreamSemanticError,
)

logger = logging.getLogger(__name__)

INVALID_RESPONSE = "Invalid response from FireCrawl API"
NO_CONTENT = "No content received from FireCrawl API"

# JSON numbers: keep ints as ints so the request body is forwarded unchanged
Number = Union[StrictInt, StrictFloat]

FORMATS_SCHEMA = {
    "type": "array",
    "items": {
        "type": "string",
        "enum": ["markdown", "html", "rawHtml", "screenshot", "links"],
    },
}


class ToolArguments(BaseModel):
    """
    Base model for tool arguments.

    Attributes are snake_case, wire names camelCase. Validation is strict and
    structural; unknown keys are kept and forwarded as-is.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        strict=True,
    )

    def to_body(self) -> dict[str, Any]:
        """Serialize back to the wire shape, leaving out fields the caller did not send."""
        body = self.model_dump(by_alias=True, exclude_unset=True)
        body.update(self.model_extra or {})
        return body


@dataclass(frozen=True)
class ToolHandler:
    """Everything the dispatcher needs to run one tool."""

    definition: types.Tool
    arguments_model: type[ToolArguments]
    build_request: Callable[[Any], ApiRequest]
    map_payload: Callable[[dict[str, Any], Any], str]
    expected_field: str
    # batch and job status payloads may omit the success flag
    requires_success: bool = True

    @property
    def name(self) -> str:
        return self.definition.name

    def validate(self, arguments: Any) -> ToolArguments:
        """
        Parse the raw argument bag into the tool's argument model.

        Raises:
            InvalidArgumentsError: On the first structural mismatch
        """
        try:
            return self.arguments_model.model_validate(arguments)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "arguments"
            raise InvalidArgumentsError(
                f"Invalid arguments for {self.name}: {field}: {first['msg']}"
            ) from e

    def map_response(self, response: httpx.Response, arguments: ToolArguments) -> str:
        """
        Turn an HTTP response into result text.

        Raises:
            UpstreamHttpError: For non-2xx responses
            UpstreamSemanticError: For 2xx responses reporting failure or missing fields
        """
        payload = read_payload(response, self.expected_field, self.requires_success)
        return self.map_payload(payload, arguments)


def read_payload(
    response: httpx.Response, expected_field: str, requires_success: bool = True
) -> dict[str, Any]:
    """
    Check the HTTP status and decode the JSON payload.

    Args:
        response: Response from the FireCrawl API
        expected_field: Top-level field a successful payload must carry
        requires_success: Reject payloads without a true `success` flag

    Returns:
        dict: The decoded payload
    """
    if not response.is_success:
        raise UpstreamHttpError(response.status_code, response.reason_phrase, response.text)

    try:
        payload = response.json()
    except ValueError as e:
        raise UpstreamSemanticError(INVALID_RESPONSE) from e

    # FireCrawl can answer 200 with an internally failed payload
    if (
        not isinstance(payload, dict)
        or payload.get("success") is False
        or (requires_success and not payload.get("success"))
        or payload.get(expected_field) in (None, "")
    ):
        logger.warning(f"Unexpected FireCrawl payload, missing '{expected_field}' or success not true")
        raise UpstreamSemanticError(INVALID_RESPONSE)

    return payload
