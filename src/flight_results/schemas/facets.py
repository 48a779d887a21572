"""
Filter facet schema.

Describes the full space of selectable filter values derived from an
unfiltered result set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

HOURS_PER_DAY = 24


def _zero_histogram() -> Tuple[float, ...]:
    return (0.0,) * HOURS_PER_DAY


@dataclass(frozen=True)
class FilterOptions:
    """
    Available filter ranges for a result set.

    Histograms are indexed by local wall-clock hour (0-23); each value is
    the lowest price seen in that hour, 0 meaning no flights.

    Attributes:
        min_price: Floor of the lowest price.
        max_price: Ceiling of the highest price.
        min_duration: Shortest duration in minutes.
        max_duration: Longest duration in minutes.
        airlines: Sorted unique carrier codes.
        min_layover: Shortest layover in minutes (0 if none).
        max_layover: Longest layover in minutes (0 if none).
        connecting_airports: Sorted unique layover airport codes.
        departure_histogram: Min price per departure hour.
        arrival_histogram: Min price per arrival hour.
    """

    min_price: float = 0
    max_price: float = 1000
    min_duration: int = 0
    max_duration: int = 0
    airlines: Tuple[str, ...] = ()
    min_layover: int = 0
    max_layover: int = 0
    connecting_airports: Tuple[str, ...] = ()
    departure_histogram: Tuple[float, ...] = field(default_factory=_zero_histogram)
    arrival_histogram: Tuple[float, ...] = field(default_factory=_zero_histogram)

    def __post_init__(self) -> None:
        """Validate histogram shape."""
        for name in ("departure_histogram", "arrival_histogram"):
            if len(getattr(self, name)) != HOURS_PER_DAY:
                raise ValueError(f"{name} must have {HOURS_PER_DAY} buckets")

    @classmethod
    def default(cls) -> "FilterOptions":
        """Facets for an empty result set (price 0-1000, empty lists)."""
        return cls()
