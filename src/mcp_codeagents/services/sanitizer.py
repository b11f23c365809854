"""Business rules to keep error details scrubbed before they reach callers."""

from __future__ import annotations

import re
from typing import Any, Mapping

RAW_PATH_PATTERN = re.compile(
    r"(?:[A-Za-z]:\\[^\s'\"]*|(?<![\w.])/(?:home|Users|root|tmp|var|etc|opt)/[^\s'\"]*)"
)
"""Absolute Windows paths and POSIX paths under well-known roots."""

MAX_DETAIL_CHARS = 500


def scrub_detail(value: str) -> str:
    """Replace raw filesystem paths and bound the length of a detail string."""

    scrubbed = RAW_PATH_PATTERN.sub("[redacted]", value)
    if len(scrubbed) > MAX_DETAIL_CHARS:
        return scrubbed[: MAX_DETAIL_CHARS - 3] + "..."
    return scrubbed


def sanitize_error_payload(payload: Mapping[str, Any]) -> dict[str, str]:
    """Return a copy with every value rendered as a scrubbed string."""

    return {key: scrub_detail(str(value)) for key, value in payload.items()}
