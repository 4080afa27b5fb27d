"""
Environment-based configuration for the FireCrawl MCP server.

Configuration is read straight from environment variables (optionally seeded
from a .env file) rather than through a settings object.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from .exceptions import MissingConfigurationError

logger = logging.getLogger(__name__)

API_KEY_ENV = "FIRE_CRAWL_API_KEY"
DEFAULT_API_URL = "https://api.firecrawl.dev"
DEFAULT_TIMEOUT = 60.0


def load_environment(env_file: str | Path | None = None) -> Path | None:
    """
    Load variables from a .env file without overriding the real environment.

    Args:
        env_file: Explicit file to load, otherwise searched upward from the cwd

    Returns:
        Path of the loaded file, or None if nothing was found
    """
    path = Path(env_file) if env_file else None
    if path is None:
        found = find_dotenv(usecwd=True)
        path = Path(found) if found else None

    if path is None or not path.exists():
        logger.debug("No .env file found, using process environment only")
        return None

    load_dotenv(path)
    logger.info(f"Loaded environment from {path}")
    return path


def get_env_bool(key: str, default: bool = False) -> bool:
    """
    Parse a boolean environment variable.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Boolean value from environment or default
    """
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on", "enabled")


def get_env_int(key: str, default: int) -> int:
    """
    Parse an integer environment variable with fallback.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid

    Returns:
        Integer value from environment or default
    """
    value = os.getenv(key)
    if value is None:
        return default

    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid {key} value: {value}, using default: {default}")
        return default


def get_env_float(key: str, default: float) -> float:
    """
    Parse a float environment variable with fallback.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid

    Returns:
        Float value from environment or default
    """
    value = os.getenv(key)
    if value is None:
        return default

    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid {key} value: {value}, using default: {default}")
        return default


def get_api_key() -> str:
    """
    Return the FireCrawl API key.

    Raises:
        MissingConfigurationError: If FIRE_CRAWL_API_KEY is unset or blank
    """
    api_key = os.getenv(API_KEY_ENV, "").strip()
    if not api_key:
        raise MissingConfigurationError(f"{API_KEY_ENV} environment variable is required")
    return api_key


def get_api_url() -> str:
    return os.getenv("FIRE_CRAWL_API_URL", DEFAULT_API_URL)


def get_request_timeout() -> float:
    return get_env_float("FIRE_CRAWL_TIMEOUT", DEFAULT_TIMEOUT)


def get_server_info() -> dict[str, Any]:
    """
    Get basic server information from environment.

    Returns:
        Dict with server name, version, and configuration status
    """
    from .. import __version__

    return {
        "server_name": "fire-crawl",
        "server_version": __version__,
        "api_url": get_api_url(),
        "api_key_configured": bool(os.getenv(API_KEY_ENV, "").strip()),
        "timeout": get_request_timeout(),
        "transport": os.getenv("FIRE_CRAWL_TRANSPORT", "stdio"),
    }


def validate_environment() -> dict[str, Any]:
    """
    Validate essential environment configuration.

    Returns:
        Dict containing validation results and recommendations
    """
    issues = []
    recommendations = []

    if not os.getenv(API_KEY_ENV, "").strip():
        issues.append(f"{API_KEY_ENV} is required but not set")
        recommendations.append(f"Set {API_KEY_ENV} environment variable")

    transport = os.getenv("FIRE_CRAWL_TRANSPORT", "stdio")
    if transport not in ("stdio", "http"):
        issues.append(f"Unsupported FIRE_CRAWL_TRANSPORT: {transport}")
        recommendations.append("Use 'stdio' or 'http' for FIRE_CRAWL_TRANSPORT")

    return {
        "valid": len(issues) == 0,
        "issues": issues,
        "recommendations": recommendations,
        "server_info": get_server_info(),
    }
