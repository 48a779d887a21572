"""
Aircraft Enricher - adds true cost and comfort rating to flights.

Ancillary fees are estimated heuristically: carriers publish neither
bag nor seat prices in search results.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List, Sequence

from flight_results.adapters.enrichment.aircraft_catalog import lookup_aircraft
from flight_results.schemas.flight import CabinClass, Flight, TrueCost, Vibe

logger = logging.getLogger(__name__)

LOW_COST_CARRIERS: FrozenSet[str] = frozenset({"FR", "U2", "NK", "F9", "W6"})
LOW_COST_BAGGAGE_FEE = 55.0
LEGACY_BAGGAGE_FEE = 35.0
ECONOMY_SEAT_FEE = 25.0
DEFAULT_DESCRIPTION = "Standard Configuration"


def estimate_true_cost(flight: Flight) -> TrueCost:
    """
    Fare plus estimated baggage and seat selection fees.

    A checked bag is charged only when none is included; seat selection
    only in economy.
    """
    baggage_fee = 0.0
    included = flight.baggage.quantity if flight.baggage is not None else None
    if not included:
        baggage_fee = (
            LOW_COST_BAGGAGE_FEE
            if flight.airline in LOW_COST_CARRIERS
            else LEGACY_BAGGAGE_FEE
        )

    seat_fee = ECONOMY_SEAT_FEE if flight.cabin_class is CabinClass.ECONOMY else 0.0

    return TrueCost(
        base_fare=flight.price,
        baggage_fee=baggage_fee,
        seat_selection_fee=seat_fee,
        total=flight.price + baggage_fee + seat_fee,
    )


def rate_vibe(flight: Flight) -> Vibe:
    """Comfort rating from the first segment's aircraft."""
    code = flight.segments[0].aircraft if flight.segments else None
    details = lookup_aircraft(code)
    return Vibe(
        score=details.vibe,
        aircraft=details.name,
        description=" • ".join(details.tags) or DEFAULT_DESCRIPTION,
        tags=details.tags,
    )


class AircraftEnricher:
    """
    FlightEnricher backed by the static aircraft catalogue.

    Preserves order and ids of its input.
    """

    async def enrich(self, flights: Sequence[Flight]) -> List[Flight]:
        """Return flights with true_cost and vibe attached."""
        enriched = [
            flight.with_annotations(
                true_cost=estimate_true_cost(flight),
                vibe=rate_vibe(flight),
            )
            for flight in flights
        ]
        logger.debug("Enriched %d flights", len(enriched))
        return enriched
