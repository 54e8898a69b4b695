#!/usr/bin/env python3
"""
Helpers for reading environment variables.

Values edited on Windows often end up with CRLF line endings in .env files;
every helper strips those before converting.
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def getenv_clean(key: str, default: str = None) -> Optional[str]:
    """Get an environment variable with whitespace and line endings removed.

    Args:
        key: Environment variable name
        default: Value used if the variable is not set

    Returns:
        Cleaned value, or default if not set

    Example:
        >>> # .env file has: THESAURUS_BUCKET=thesauri\r\n
        >>> getenv_clean("THESAURUS_BUCKET", "default")
        'thesauri'
    """
    raw_value = os.getenv(key, default)

    if raw_value is None:
        return None

    cleaned = raw_value.strip()

    if raw_value != cleaned:
        logger.warning(
            f"Environment variable {key} had trailing whitespace/line endings: "
            f"raw={repr(raw_value)}, cleaned={repr(cleaned)}"
        )

    return cleaned


def getenv_int(key: str, default: int) -> int:
    """Get an environment variable as an integer.

    Falls back to default (with a warning) when the value is not an integer.

    Example:
        >>> # .env file has: THESAURUS_PLATFORMS_TTL=3600\r\n
        >>> getenv_int("THESAURUS_PLATFORMS_TTL", 86400)
        3600
    """
    raw_value = getenv_clean(key, None)

    if raw_value is None or raw_value == "":
        return default

    try:
        return int(raw_value)
    except ValueError:
        logger.warning(
            f"Environment variable {key} is not a valid integer: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default


def getenv_list(key: str, default: list[str] = None, separator: str = ",") -> list[str]:
    """Get an environment variable as a list of cleaned, non-empty items.

    Example:
        >>> # .env file has: CORS_ORIGINS=http://localhost:3000,http://localhost:8080\r\n
        >>> getenv_list("CORS_ORIGINS", ["http://localhost:3000"])
        ['http://localhost:3000', 'http://localhost:8080']
    """
    if default is None:
        default = []

    raw_value = getenv_clean(key, None)

    if not raw_value:
        return default

    items = [item.strip() for item in raw_value.split(separator) if item.strip()]
    return items if items else default
