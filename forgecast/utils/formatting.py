"""
Helper functions for formatting data into human-readable strings.
"""

import math
import re
from typing import Any, Optional


def format_size(bytes_size: int) -> str:
    """Formats bytes into a human-readable size string (e.g., '145.3 MB')."""
    if bytes_size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while bytes_size >= 1024 and i < len(units) - 1:
        bytes_size /= 1024
        i += 1
    return f"{bytes_size:.1f} {units[i]}"


def round_seconds(seconds: float) -> int:
    """Rounds a duration to whole seconds, halves rounding up."""
    return int(math.floor(max(seconds, 0.0) + 0.5))


def format_duration(seconds: float) -> str:
    """
    Formats a duration in seconds as an iTunes duration string.

    Durations under an hour are rendered as 'MM:SS', longer ones as 'HH:MM:SS'.
    """
    total = round_seconds(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def leading_int(value: Any) -> Optional[int]:
    """
    Reads the integer at the start of a front matter value.

    Numbers pass through, strings are read up to the first non-numeric
    character ('12 MB' is 12, '1.5e6' is 1500000). Returns None when the
    value does not start with a number.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_NUMBER.match(str(value)) if value is not None else None
    if not match:
        return None
    number = float(match.group(1))
    return int(number) if math.isfinite(number) else None
