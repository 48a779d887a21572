"""
Flight annotation port interfaces.

Two independent post-aggregation stages run concurrently on the raw
flights: cost/vibe enrichment and predictive scoring. Either may fail
without dropping flights.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from flight_results.schemas.flight import Flight


@runtime_checkable
class FlightEnricher(Protocol):
    """
    Adds true_cost and vibe to flights.

    Must preserve order and the set of ids (no filtering), so results
    can be used positionally.
    """

    async def enrich(self, flights: Sequence[Flight]) -> List[Flight]:
        ...


@runtime_checkable
class FlightPredictor(Protocol):
    """
    Adds analysis and prediction to flights.

    May reorder or drop flights; callers merge its output by id.
    """

    async def predict(self, flights: Sequence[Flight]) -> List[Flight]:
        ...
