"""
Filter Engine - applies user criteria to a flight collection.

Each active criterion becomes a predicate; a flight is kept only when
every predicate passes. Relative order is preserved and flights are
never modified.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from flight_results.schemas.criteria import FilterCriteria, TimeWindow
from flight_results.schemas.flight import Flight
from flight_results.services.wall_clock import minutes_of_day

logger = logging.getLogger(__name__)

FlightPredicate = Callable[[Flight], bool]


def _in_window(timestamp: str, window: TimeWindow) -> bool:
    minutes = minutes_of_day(timestamp)
    if minutes is None:
        return False
    low, high = window
    return low <= minutes <= high


def _has_baggage(flight: Flight) -> bool:
    baggage = flight.baggage
    return baggage is not None and (baggage.quantity or 0) >= 1


def _connects_via(flight: Flight, airports: frozenset) -> bool:
    # Direct flights are never excluded by the connecting-airport whitelist
    if flight.stops == 0:
        return True
    return any(layover.airport in airports for layover in flight.layovers)


def build_predicates(criteria: FilterCriteria) -> List[FlightPredicate]:
    """
    Translate criteria into the list of active predicates.

    Args:
        criteria: User-selected filter set.

    Returns:
        Predicates for every active criterion (empty when nothing is set).
    """
    predicates: List[FlightPredicate] = [
        lambda f: f.price <= criteria.max_price,
    ]

    if criteria.airlines:
        predicates.append(lambda f: f.airline in criteria.airlines)
    if criteria.stops:
        predicates.append(lambda f: f.stops in criteria.stops)
    if criteria.max_duration is not None:
        predicates.append(lambda f: f.duration_minutes <= criteria.max_duration)
    if criteria.departure_window is not None:
        predicates.append(
            lambda f: _in_window(f.departure.time, criteria.departure_window)
        )
    if criteria.arrival_window is not None:
        predicates.append(
            lambda f: _in_window(f.arrival.time, criteria.arrival_window)
        )
    if criteria.has_baggage:
        predicates.append(_has_baggage)
    if criteria.max_layover_duration is not None:
        predicates.append(
            lambda f: all(
                layover.duration <= criteria.max_layover_duration
                for layover in f.layovers
            )
        )
    if criteria.connecting_airports:
        predicates.append(lambda f: _connects_via(f, criteria.connecting_airports))

    return predicates


def apply_filters(
    flights: Sequence[Flight],
    criteria: Optional[FilterCriteria] = None,
) -> List[Flight]:
    """
    Keep the flights satisfying every active criterion.

    Args:
        flights: Flights to filter.
        criteria: Filter set. None means no filtering.

    Returns:
        New list, a subsequence of flights in the original order.
    """
    if criteria is None:
        return list(flights)

    predicates = build_predicates(criteria)
    result = [f for f in flights if all(p(f) for p in predicates)]

    logger.debug("Filtered %d -> %d flights", len(flights), len(result))
    return result
