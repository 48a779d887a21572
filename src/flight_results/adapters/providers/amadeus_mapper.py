"""
Amadeus offer mapping.

Maps Flight Offers Search items to canonical flights and applies the
aggregation rules for an Amadeus result set: duplicate departures are
dropped, and round trips must return on the outbound carrier.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from flight_results.adapters.providers.offers import (
    AmadeusOffer,
    derive_layovers,
    normalize_duration,
)
from flight_results.schemas.flight import (
    Baggage,
    Flight,
    FlightEndpoint,
    Itinerary,
    Segment,
    SegmentEndpoint,
)


def _map_segment(raw: Dict[str, Any]) -> Segment:
    departure = raw["departure"]
    arrival = raw["arrival"]
    aircraft = raw.get("aircraft") or {}
    return Segment(
        departure=SegmentEndpoint(
            iata_code=departure["iataCode"],
            at=departure["at"],
            terminal=departure.get("terminal"),
        ),
        arrival=SegmentEndpoint(
            iata_code=arrival["iataCode"],
            at=arrival["at"],
            terminal=arrival.get("terminal"),
        ),
        carrier_code=raw["carrierCode"],
        number=str(raw["number"]),
        duration=normalize_duration(raw.get("duration", "")),
        aircraft=aircraft.get("code"),
    )


def _endpoint(segment: SegmentEndpoint) -> FlightEndpoint:
    # Amadeus offers carry no city names; dictionaries resolve codes
    return FlightEndpoint(code=segment.iata_code, city=segment.iata_code, time=segment.at)


def _map_baggage(payload: Dict[str, Any]) -> Optional[Baggage]:
    try:
        bags = payload["travelerPricings"][0]["fareDetailsBySegment"][0]["includedCheckedBags"]
    except (KeyError, IndexError, TypeError):
        return None
    if not bags:
        return None
    return Baggage(
        quantity=bags.get("quantity"),
        weight=bags.get("weight"),
        unit=bags.get("weightUnit"),
    )


def _map_itinerary(raw: Dict[str, Any]) -> Itinerary:
    segments = [_map_segment(s) for s in raw["segments"]]
    return Itinerary(
        departure=_endpoint(segments[0].departure),
        arrival=_endpoint(segments[-1].arrival),
        duration=normalize_duration(raw.get("duration", "")),
        stops=len(segments) - 1,
        segments=tuple(segments),
        layovers=tuple(derive_layovers(segments)),
    )


def map_amadeus_offer(offer: AmadeusOffer) -> Flight:
    """
    Map one Amadeus offer to a Flight.

    The first itinerary is the outbound, the second (if any) the return.

    Raises:
        KeyError, IndexError, TypeError, ValueError: If the payload is malformed.
    """
    payload = offer.payload
    itineraries = payload["itineraries"]
    outbound = _map_itinerary(itineraries[0])
    first = outbound.segments[0]

    return Flight(
        id=str(payload["id"]),
        airline=first.carrier_code,
        flight_number=f"{first.carrier_code}{first.number}",
        departure=outbound.departure,
        arrival=outbound.arrival,
        duration=outbound.duration,
        stops=outbound.stops,
        price=float(payload["price"]["total"]),
        cabin_class=offer.cabin_class,
        segments=outbound.segments,
        layovers=outbound.layovers,
        baggage=_map_baggage(payload),
        return_flight=_map_itinerary(itineraries[1]) if len(itineraries) > 1 else None,
    )


def deduplicate_flights(flights: Iterable[Flight]) -> List[Flight]:
    """Keep the first flight per (airline, flight number, departure time)."""
    seen = set()
    unique = []
    for flight in flights:
        key = (flight.airline, flight.flight_number, flight.departure.time)
        if key in seen:
            continue
        seen.add(key)
        unique.append(flight)
    return unique


def same_carrier_round_trip(flight: Flight) -> bool:
    """True unless the return leg starts on a different carrier."""
    if flight.return_flight is None or not flight.return_flight.segments:
        return True
    return flight.return_flight.segments[0].carrier_code == flight.airline


def apply_aggregation_rules(flights: Iterable[Flight]) -> List[Flight]:
    """Drop duplicate departures and round trips returning on another carrier."""
    return [f for f in deduplicate_flights(flights) if same_carrier_round_trip(f)]
