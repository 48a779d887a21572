"""
Duration Codec - ISO-8601-like duration tokens to minutes.

Providers emit 'PT2H30M' (Amadeus, Duffel), day-bearing 'P1DT2H30M' on
long itineraries, and occasionally lower-case or spaced '2h 30m'. Each
day, hour and minute component is read wherever it appears.

Tokens repeat heavily within a result set, so parses are memoised. The memo is cleared wholesale once it grows past
MAX_CACHE_SIZE entries instead of evicting individual tokens.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

MAX_CACHE_SIZE = 1000

_COMPONENT_PATTERN = re.compile(r"(\d+)\s*([DHM])", re.IGNORECASE)

_MINUTES_PER_UNIT = {"D": 24 * 60, "H": 60, "M": 1}

_cache: Dict[str, int] = {}


def parse_duration(token: Optional[str]) -> int:
    """
    Parse a duration token into whole minutes.

    Args:
        token: Duration such as 'PT2H30M', 'P1DT2H', '2H 30M' or '10h00m'.

    Returns:
        Total minutes; 0 for empty, None or tokens with no component.
    """
    if not token or not isinstance(token, str):
        return 0

    cached = _cache.get(token)
    if cached is not None:
        return cached

    minutes = sum(
        int(amount) * _MINUTES_PER_UNIT[unit.upper()]
        for amount, unit in _COMPONENT_PATTERN.findall(token)
    )

    if len(_cache) >= MAX_CACHE_SIZE:
        _cache.clear()
    _cache[token] = minutes
    return minutes


def clear_duration_cache() -> None:
    """Drop all memoised parses."""
    _cache.clear()


def duration_cache_size() -> int:
    return len(_cache)


def format_duration(minutes: int) -> str:
    """Render minutes as '2h 30m'."""
    hours, mins = divmod(max(int(minutes), 0), 60)
    return f"{hours}h {mins:02d}m"
