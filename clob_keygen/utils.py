"""
Helpers for upstream error messages and display formatting.
"""

import re
from typing import Any, Optional

from clob_keygen.constants import ERROR_MESSAGE_KEYS, MAX_ERROR_MESSAGE_LENGTH

_WHITESPACE_RE = re.compile(r"\s+")

TRUTHY_VALUES = ("1", "true", "yes", "on")


def parse_bool(value: Optional[str]) -> bool:
    """Interpret an environment flag such as "1", "true", "yes" or "on"."""
    if not value:
        return False
    return value.strip().lower() in TRUTHY_VALUES


def extract_message(value: Any) -> Optional[str]:
    """Pull a human-readable message out of a decoded JSON error body.

    Probes "message", "error", "detail" and "reason" in that order,
    recursing into nested objects and arrays.

    Args:
        value: A decoded JSON value.

    Returns:
        The first non-blank message found, or None.
    """
    if isinstance(value, str):
        return value if value.strip() else None

    if isinstance(value, list):
        for item in value:
            found = extract_message(item)
            if found:
                return found
        return None

    if isinstance(value, dict):
        for key in ERROR_MESSAGE_KEYS:
            if key in value:
                found = extract_message(value[key])
                if found:
                    return found
        return None

    return None


def sanitize_message(
    status: Optional[int],
    raw_message: Optional[str] = None,
    product: str = "Forkast",
    debug: bool = False,
) -> str:
    """Map an upstream failure to stable, user-safe phrasing.

    Args:
        status: HTTP status code, if any.
        raw_message: Upstream message text.
        product: Product name used in the phrasing.
        debug: Prefix the truncated upstream message to the result.

    Returns:
        The message to show to users.
    """
    normalized = _WHITESPACE_RE.sub(" ", raw_message or "").strip()
    truncated = normalized[:MAX_ERROR_MESSAGE_LENGTH]

    if status in (401, 403):
        sanitized = f"Credentials rejected by {product}. Generate a fresh API key and try again."
    elif status == 429:
        sanitized = "Too many requests. Hold on a moment before retrying."
    elif status is not None and 500 <= status < 600:
        sanitized = f"{product} is temporarily unavailable. Retry shortly."
    elif truncated:
        sanitized = truncated
    else:
        sanitized = f"{product} request failed. Please try again."

    if debug and truncated and sanitized != truncated:
        return f"{truncated} - {sanitized}"

    return sanitized


def shorten_address(address: Optional[str], chars: int = 4) -> str:
    """Shorten an address for display, e.g. "0xf39F...2266"."""
    if not address:
        return ""
    length = max(chars, 2)
    return f"{address[:length + 2]}...{address[-length:]}"
