"""
Wall-clock helpers for ISO timestamp strings.

Flight timestamps are local times at the airport. Calendar dates and
times of day are read straight from the string so the host timezone
never moves a flight into another hour bucket or day. Only
chronological sorting needs a real instant.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

_TIME_OF_DAY = re.compile(r"T(\d{2}):(\d{2})")


def calendar_date(timestamp: str) -> str:
    """'2025-03-01T10:30:00' -> '2025-03-01'."""
    return (timestamp or "").split("T")[0]


def minutes_of_day(timestamp: str) -> Optional[int]:
    """
    Minutes since local midnight, parsed from the 'THH:MM' substring.

    Returns:
        0-1439, or None when the timestamp has no parsable time of day.
    """
    match = _TIME_OF_DAY.search(timestamp or "")
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def hour_of_day(timestamp: str) -> Optional[int]:
    """Local wall-clock hour (0-23), or None when unparsable."""
    minutes = minutes_of_day(timestamp)
    return None if minutes is None else minutes // 60


def instant(timestamp: str) -> Optional[float]:
    """
    Epoch seconds of a timestamp, for chronological ordering.

    Offsets are honoured; naive timestamps are read as UTC.

    Returns:
        POSIX timestamp, or None when unparsable.
    """
    if not timestamp:
        return None
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()
