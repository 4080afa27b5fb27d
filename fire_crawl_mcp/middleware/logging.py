"""
Tool-call logging middleware for the FireCrawl MCP server.

Logs every tools/call request with a correlation id, masked arguments, the
outcome and its duration. Output goes to the module logger, to the MCP client
through the FastMCP context, and optionally to a rotating log file.
"""

import json
import logging
import logging.handlers
import time
import uuid
from pathlib import Path
from typing import Any

from fastmcp.server.middleware import Middleware, MiddlewareContext

logger = logging.getLogger(__name__)

SENSITIVE_PATTERNS = frozenset({
    "api_key", "apikey", "token", "password", "secret", "auth", "authorization",
})


class RotatingFileHandler:
    """
    Rotating log file for tool-call records, creating its directory on demand.
    """

    def __init__(
        self,
        filename: str,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        encoding: str = "utf-8",
    ):
        """
        Initialize rotating file handler.

        Args:
            filename: Path to log file
            max_bytes: Maximum file size before rotation
            backup_count: Number of backup files to keep
            encoding: File encoding
        """
        self.base_filename = filename
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.encoding = encoding

        Path(filename).parent.mkdir(parents=True, exist_ok=True)

        self.handler = logging.handlers.RotatingFileHandler(
            filename=filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding=encoding,
        )
        self.handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

        self._file_logger = logging.getLogger(f"{__name__}.file.{id(self)}")
        self._file_logger.setLevel(logging.DEBUG)
        self._file_logger.propagate = False
        self._file_logger.addHandler(self.handler)

    def write(self, message: str, level: int = logging.INFO) -> None:
        self._file_logger.log(level, message)

    def close(self) -> None:
        """Close the file handler."""
        self._file_logger.removeHandler(self.handler)
        self.handler.close()


def mask_value(value: str) -> str:
    """Mask a sensitive value, keeping a short prefix and suffix of long values."""
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


def mask_sensitive_dict(data: Any) -> Any:
    """Recursively mask values whose key looks like a credential."""
    if isinstance(data, list):
        return [mask_sensitive_dict(item) for item in data]
    if not isinstance(data, dict):
        return data

    masked = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(pattern in key_lower for pattern in SENSITIVE_PATTERNS):
            masked[key] = mask_value(str(value)) if value else value
        else:
            masked[key] = mask_sensitive_dict(value)
    return masked


class ToolCallLoggingMiddleware(Middleware):
    """
    Human-readable tool-call logging with optional argument payloads.
    """

    def __init__(
        self,
        include_payloads: bool = False,
        max_payload_length: int = 1000,
        log_file: str | None = None,
        max_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        notify_client: bool = False,
    ):
        """
        Initialize logging middleware.

        Args:
            include_payloads: Whether to include (masked) tool arguments
            max_payload_length: Maximum payload length to log
            log_file: Path to log file for file logging
            max_file_size: Maximum log file size before rotation
            backup_count: Number of backup files to keep
            notify_client: Also send log lines to the MCP client
        """
        self.include_payloads = include_payloads
        self.max_payload_length = max_payload_length
        self.notify_client = notify_client

        self.file_handler = None
        if log_file:
            self.file_handler = RotatingFileHandler(
                filename=log_file,
                max_bytes=max_file_size,
                backup_count=backup_count,
            )

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        """Log a tool call and its outcome."""
        start_time = time.perf_counter()
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        tool_name = getattr(context.message, "name", "unknown")

        message = f"[{request_id}] CALL {tool_name}"
        if self.include_payloads:
            payload = self._format_payload(getattr(context.message, "arguments", None))
            if payload:
                message += f" args={payload}"
        await self._write(context, message, logging.INFO)

        try:
            result = await call_next(context)
        except Exception as error:
            duration_ms = (time.perf_counter() - start_time) * 1000
            await self._write(
                context,
                f"[{request_id}] FAILED {tool_name} in {duration_ms:.2f}ms: "
                f"{type(error).__name__}: {error}",
                logging.WARNING,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        await self._write(
            context, f"[{request_id}] OK {tool_name} in {duration_ms:.2f}ms", logging.INFO
        )
        return result

    def _format_payload(self, payload: Any) -> str | None:
        """Format payload for logging with length limits."""
        if payload is None:
            return None

        payload_str = json.dumps(mask_sensitive_dict(payload), default=str)
        if len(payload_str) > self.max_payload_length:
            truncated = payload_str[:self.max_payload_length]
            payload_str = f"{truncated}... [truncated, total length: {len(payload_str)}]"
        return payload_str

    async def _write(self, context: MiddlewareContext, message: str, level: int) -> None:
        logger.log(level, message)

        if self.notify_client and context.fastmcp_context:
            if level >= logging.WARNING:
                await context.fastmcp_context.warning(message)
            else:
                await context.fastmcp_context.info(message)

        if self.file_handler:
            self.file_handler.write(message, level)

    def close(self) -> None:
        """Clean up resources."""
        if self.file_handler:
            self.file_handler.close()
