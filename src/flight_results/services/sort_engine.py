"""Sort Engine - orders a flight collection by one of four strategies."""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Sequence, Tuple, Union

from flight_results.schemas.criteria import SortOption
from flight_results.schemas.flight import Flight
from flight_results.services.wall_clock import instant


def _departure_key(descending: bool) -> Callable[[Flight], Tuple[bool, float]]:
    # Unparsable timestamps go last in both directions
    def key(flight: Flight) -> Tuple[bool, float]:
        moment = instant(flight.departure.time)
        if moment is None:
            return True, math.inf
        return False, -moment if descending else moment

    return key


_SORT_KEYS: Dict[SortOption, Callable[[Flight], object]] = {
    SortOption.BEST: lambda f: f.price,
    SortOption.DURATION_ASC: lambda f: f.duration_minutes,
    SortOption.DEPARTURE_ASC: _departure_key(descending=False),
    SortOption.DEPARTURE_DESC: _departure_key(descending=True),
}


def sort_flights(
    flights: Sequence[Flight],
    strategy: Union[SortOption, str, None] = None,
) -> List[Flight]:
    """
    Return a stably sorted copy of flights.

    Args:
        flights: Flights to order.
        strategy: 'best' (price ascending), 'duration_asc',
            'departure_asc' or 'departure_desc'. Unknown or missing
            values fall back to 'best'.

    Returns:
        New sorted list; the input is not modified.
    """
    option = SortOption.parse(strategy)
    return sorted(flights, key=_SORT_KEYS[option])
