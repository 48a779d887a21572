"""
Filter and sort parameters.

Defines the per-request constraint set applied by the filter engine and
the sort strategies understood by the sort engine. Both are built from
query parameters on every request and never persisted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple

TimeWindow = Tuple[int, int]

MINUTES_PER_DAY = 24 * 60


class SortOption(str, Enum):
    """Result ordering strategies."""

    BEST = "best"
    DURATION_ASC = "duration_asc"
    DEPARTURE_ASC = "departure_asc"
    DEPARTURE_DESC = "departure_desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOption":
        """Parse a sort option, falling back to BEST for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.BEST


@dataclass(frozen=True)
class FilterCriteria:
    """
    Immutable user-selected filter set.

    A flight passes when every active constraint is satisfied. Empty
    collections and None values mean "no constraint".

    Attributes:
        max_price: Maximum total price (inf = unlimited).
        airlines: Allowed carrier codes (empty = all).
        stops: Allowed stop counts (empty = all).
        max_duration: Maximum total duration in minutes.
        departure_window: (min, max) departure minute of day, inclusive.
        arrival_window: (min, max) arrival minute of day, inclusive.
        has_baggage: Require at least one included checked bag.
        max_layover_duration: Maximum length of any single layover (minutes).
        connecting_airports: Layover airport whitelist (applies to flights
            with stops only).
    """

    max_price: float = math.inf
    airlines: FrozenSet[str] = frozenset()
    stops: FrozenSet[int] = frozenset()
    max_duration: Optional[int] = None
    departure_window: Optional[TimeWindow] = None
    arrival_window: Optional[TimeWindow] = None
    has_baggage: bool = False
    max_layover_duration: Optional[int] = None
    connecting_airports: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        """Validate constraints after initialization."""
        if self.max_price < 0:
            raise ValueError(f"max_price must be >= 0, got {self.max_price}")
        if self.max_duration is not None and self.max_duration < 0:
            raise ValueError(f"max_duration must be >= 0, got {self.max_duration}")
        if self.max_layover_duration is not None and self.max_layover_duration < 0:
            raise ValueError(
                f"max_layover_duration must be >= 0, got {self.max_layover_duration}"
            )
        for name in ("departure_window", "arrival_window"):
            window = getattr(self, name)
            if window is None:
                continue
            low, high = window
            if low > high:
                raise ValueError(f"{name} min ({low}) must be <= max ({high})")

    @classmethod
    def create(
        cls,
        max_price: Optional[float] = None,
        airlines: Optional[Iterable[str]] = None,
        stops: Optional[Iterable[int]] = None,
        max_duration: Optional[int] = None,
        departure_window: Optional[Iterable[int]] = None,
        arrival_window: Optional[Iterable[int]] = None,
        has_baggage: bool = False,
        max_layover_duration: Optional[int] = None,
        connecting_airports: Optional[Iterable[str]] = None,
    ) -> "FilterCriteria":
        """
        Factory method for creating FilterCriteria.

        Converts mutable collections to frozensets and windows to tuples.

        Returns:
            Validated FilterCriteria instance.
        """
        return cls(
            max_price=math.inf if max_price is None else float(max_price),
            airlines=frozenset(airlines or ()),
            stops=frozenset(int(s) for s in (stops or ())),
            max_duration=max_duration,
            departure_window=_to_window(departure_window),
            arrival_window=_to_window(arrival_window),
            has_baggage=bool(has_baggage),
            max_layover_duration=max_layover_duration,
            connecting_airports=frozenset(connecting_airports or ()),
        )

    @classmethod
    def from_query_params(cls, params: Mapping[str, Optional[str]]) -> "FilterCriteria":
        """
        Build criteria from raw query-string values.

        Lists are comma separated ('airlines=BA,LH', 'stops=0,1'), windows
        are 'min,max' minutes of day ('departureWindow=360,720').

        Args:
            params: Mapping of camelCase query parameter names to strings.

        Returns:
            Validated FilterCriteria instance.

        Raises:
            ValueError: If a numeric parameter cannot be parsed.
        """
        max_price = params.get("maxPrice")
        max_duration = params.get("maxDuration")
        max_layover = params.get("maxLayoverDuration")

        return cls.create(
            max_price=float(max_price) if max_price else None,
            airlines=_split(params.get("airlines")),
            stops=[int(s) for s in _split(params.get("stops"))],
            max_duration=int(max_duration) if max_duration else None,
            departure_window=_parse_window(params.get("departureWindow")),
            arrival_window=_parse_window(params.get("arrivalWindow")),
            has_baggage=(params.get("hasBaggage") or "").lower() in ("1", "true", "yes"),
            max_layover_duration=int(max_layover) if max_layover else None,
            connecting_airports=_split(params.get("connectingAirports")),
        )

    @property
    def is_empty(self) -> bool:
        """True when no constraint is active."""
        return self == FilterCriteria()


def _split(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_window(value: Optional[str]) -> Optional[TimeWindow]:
    parts = _split(value)
    if not parts:
        return None
    if len(parts) != 2:
        raise ValueError(f"time window must be 'min,max', got {value!r}")
    return int(parts[0]), int(parts[1])


def _to_window(window: Optional[Iterable[int]]) -> Optional[TimeWindow]:
    if window is None:
        return None
    low, high = tuple(window)
    return int(low), int(high)
