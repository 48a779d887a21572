"""
Price History Merger - reconciles the market series with live results.

Dates are compared as 'YYYY-MM-DD' strings against the calendar date of
each flight's local departure timestamp.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from flight_results.schemas.flight import Flight
from flight_results.schemas.price_history import (
    IntradayMetric,
    MergedPricePoint,
    PriceHistoryFrame,
    PricePoint,
    PriceSource,
)
from flight_results.services.wall_clock import calendar_date, hour_of_day

logger = logging.getLogger(__name__)


def _live_minimums(flights: Sequence[Flight]) -> Dict[str, float]:
    minimums: Dict[str, float] = {}
    for flight in flights:
        day = calendar_date(flight.departure.time)
        if day not in minimums or flight.price < minimums[day]:
            minimums[day] = flight.price
    return minimums


def merge_price_history(
    flights: Sequence[Flight],
    price_history: PriceHistoryFrame,
) -> List[MergedPricePoint]:
    """
    Overlay live minimum prices onto the historical series.

    A historical date with live departures takes the lowest live price
    for price/min/max (source LIVE); other dates are kept verbatim
    (source HISTORY).

    Args:
        flights: Live flights (typically the filtered set).
        price_history: Validated per-day market series.

    Returns:
        One point per historical row, in the series' order.
    """
    if price_history is None or price_history.empty:
        return []

    live = _live_minimums(flights)
    merged = []
    for row in price_history.to_dict("records"):
        day = str(row["date"])
        if day in live:
            lowest = live[day]
            merged.append(
                MergedPricePoint(
                    date=day,
                    price=lowest,
                    min=lowest,
                    max=lowest,
                    source=PriceSource.LIVE,
                )
            )
        else:
            merged.append(
                MergedPricePoint(
                    date=day,
                    price=float(row["price"]),
                    min=float(row["min"]),
                    max=float(row["max"]),
                    source=PriceSource.HISTORY,
                )
            )

    logger.debug(
        "Merged %d history points (%d live)",
        len(merged),
        sum(1 for p in merged if p.source is PriceSource.LIVE),
    )
    return merged


def market_average(merged: Sequence[MergedPricePoint]) -> float:
    """Mean price of a merged series, 0 when empty."""
    if not merged:
        return 0.0
    return sum(point.price for point in merged) / len(merged)


def intraday_metrics(flights: Sequence[Flight]) -> List[IntradayMetric]:
    """
    Bucket flights by local departure hour.

    Hours without departures are omitted; flights with an unparsable
    departure hour are skipped.

    Returns:
        Metrics ordered by hour.
    """
    buckets: Dict[int, List[float]] = defaultdict(list)
    for flight in flights:
        hour = hour_of_day(flight.departure.time)
        if hour is not None:
            buckets[hour].append(flight.price)

    return [
        IntradayMetric(
            hour=hour,
            label=f"{hour}:00",
            min_price=min(prices),
            avg_price=sum(prices) / len(prices),
            count=len(prices),
        )
        for hour, prices in sorted(buckets.items())
    ]


def price_points(price_history: PriceHistoryFrame) -> Tuple[PricePoint, ...]:
    """Convert a history frame into envelope points."""
    if price_history is None or price_history.empty:
        return ()
    return tuple(
        PricePoint(
            date=str(row["date"]),
            price=float(row["price"]),
            min=float(row["min"]),
            max=float(row["max"]),
        )
        for row in price_history.to_dict("records")
    )
