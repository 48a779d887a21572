"""
Facet Extractor - derives available filter ranges from a result set.

Facets are computed from the full unfiltered collection so the filter
panel always shows the whole space of values, whatever is selected.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from flight_results.schemas.facets import HOURS_PER_DAY, FilterOptions
from flight_results.schemas.flight import Flight
from flight_results.services.wall_clock import hour_of_day

logger = logging.getLogger(__name__)


def _record_hour(histogram: List[float], hour: Optional[int], price: float) -> None:
    # 0 marks an empty bucket
    if hour is None:
        return
    if histogram[hour] == 0 or price < histogram[hour]:
        histogram[hour] = price


def extract_facets(flights: Sequence[Flight]) -> FilterOptions:
    """
    Scan a flight collection once and derive its filter options.

    Price bounds are floor(min) / ceil(max). Histogram buckets are the
    local wall-clock hour of departure and arrival; a timestamp without
    a parsable hour is left out of the histogram.

    Args:
        flights: Unfiltered flights.

    Returns:
        FilterOptions bounding every flight in the collection, or
        FilterOptions.default() for an empty collection.
    """
    if not flights:
        return FilterOptions.default()

    min_price = math.inf
    max_price = -math.inf
    min_duration = math.inf
    max_duration = -math.inf
    min_layover = math.inf
    max_layover = -math.inf
    airlines = set()
    connecting = set()
    departure_hist = [0.0] * HOURS_PER_DAY
    arrival_hist = [0.0] * HOURS_PER_DAY

    for flight in flights:
        price = flight.price
        min_price = min(min_price, price)
        max_price = max(max_price, price)

        duration = flight.duration_minutes
        min_duration = min(min_duration, duration)
        max_duration = max(max_duration, duration)

        airlines.add(flight.airline)

        for layover in flight.layovers:
            min_layover = min(min_layover, layover.duration)
            max_layover = max(max_layover, layover.duration)
            connecting.add(layover.airport)

        _record_hour(departure_hist, hour_of_day(flight.departure.time), price)
        _record_hour(arrival_hist, hour_of_day(flight.arrival.time), price)

    has_layovers = min_layover != math.inf

    options = FilterOptions(
        min_price=math.floor(min_price),
        max_price=math.ceil(max_price),
        min_duration=math.floor(min_duration),
        max_duration=math.ceil(max_duration),
        airlines=tuple(sorted(airlines)),
        min_layover=int(min_layover) if has_layovers else 0,
        max_layover=int(max_layover) if has_layovers else 0,
        connecting_airports=tuple(sorted(connecting)),
        departure_histogram=tuple(departure_hist),
        arrival_histogram=tuple(arrival_hist),
    )

    logger.debug(
        "Extracted facets from %d flights: price %s-%s, %d airlines",
        len(flights),
        options.min_price,
        options.max_price,
        len(options.airlines),
    )
    return options
