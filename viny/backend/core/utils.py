"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

import re
from datetime import datetime, timezone

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

PREVIEW_LENGTH = 100


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC. This ensures consistent behavior across
    the codebase and simplifies database storage.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def build_preview(content: str, length: int = PREVIEW_LENGTH) -> str:
    """
    Derive the list preview for a note body.

    The first ``length`` characters of the content, followed by ``...``
    only when the content was actually truncated.
    """
    if len(content) > length:
        return content[:length] + "..."
    return content


def is_hex_color(value: str) -> bool:
    """Check for a ``#RRGGBB`` color string."""
    return bool(HEX_COLOR_PATTERN.match(value))


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into a naive UTC datetime.

    Accepts a trailing ``Z``. Returns None for empty or unparseable input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated query value, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def dedupe_names(names: list[str]) -> list[str]:
    """Strip and dedupe names, preserving first-seen order and case."""
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        cleaned = name.strip()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            result.append(cleaned)
    return result
