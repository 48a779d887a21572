"""
Duffel offer mapping.

Maps Duffel offers (slices of segments) to canonical flights and builds
the code dictionaries Duffel does not return alongside its offers.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from flight_results.adapters.providers.offers import (
    DuffelOffer,
    derive_layovers,
    normalize_duration,
)
from flight_results.schemas.flight import (
    CabinClass,
    Flight,
    FlightEndpoint,
    Itinerary,
    Segment,
    SegmentEndpoint,
)

MISSING_DURATION = "00h00m"


def _map_segment(raw: Dict[str, Any]) -> Segment:
    carrier = raw["operating_carrier"]
    aircraft = raw.get("aircraft") or {}
    duration = raw.get("duration")
    return Segment(
        departure=SegmentEndpoint(
            iata_code=raw["origin"]["iata_code"],
            at=raw["departing_at"],
            terminal=raw.get("origin_terminal"),
        ),
        arrival=SegmentEndpoint(
            iata_code=raw["destination"]["iata_code"],
            at=raw["arriving_at"],
            terminal=raw.get("destination_terminal"),
        ),
        carrier_code=carrier["iata_code"],
        number=str(raw.get("operating_carrier_flight_number") or ""),
        duration=normalize_duration(duration) if duration else MISSING_DURATION,
        aircraft=aircraft.get("iata_code"),
    )


def _endpoint(raw_place: Dict[str, Any], segment: SegmentEndpoint) -> FlightEndpoint:
    city = raw_place.get("city_name") or segment.iata_code
    return FlightEndpoint(code=segment.iata_code, city=city, time=segment.at)


def _map_slice(raw: Dict[str, Any]) -> Itinerary:
    raw_segments = raw["segments"]
    segments = [_map_segment(s) for s in raw_segments]
    duration = raw.get("duration")
    return Itinerary(
        departure=_endpoint(raw_segments[0]["origin"], segments[0].departure),
        arrival=_endpoint(raw_segments[-1]["destination"], segments[-1].arrival),
        duration=normalize_duration(duration) if duration else MISSING_DURATION,
        stops=len(segments) - 1,
        segments=tuple(segments),
        layovers=tuple(derive_layovers(segments)),
    )


def map_duffel_offer(offer: DuffelOffer) -> Flight:
    """
    Map one Duffel offer to a Flight.

    The first slice is the outbound, the second (if any) the return.
    The validating carrier is the offer owner.

    Raises:
        KeyError, IndexError, TypeError, ValueError: If the payload is malformed.
    """
    payload = offer.payload
    slices = payload["slices"]
    outbound = _map_slice(slices[0])
    first = outbound.segments[0]

    return Flight(
        id=str(payload["id"]),
        airline=payload["owner"]["iata_code"],
        flight_number=f"{first.carrier_code}{first.number}",
        departure=outbound.departure,
        arrival=outbound.arrival,
        duration=outbound.duration,
        stops=outbound.stops,
        price=float(payload["total_amount"]),
        cabin_class=CabinClass.parse(payload.get("cabin_class")),
        segments=outbound.segments,
        layovers=outbound.layovers,
        return_flight=_map_slice(slices[1]) if len(slices) > 1 else None,
    )


def build_dictionaries(flights: Sequence[Flight]) -> Dict[str, Dict[str, str]]:
    """
    Airline and location dictionaries from the codes seen in flights.

    Duffel returns no dictionaries, so codes map to themselves (or to the
    city name where the offer carried one).
    """
    airlines: Dict[str, str] = {}
    locations: Dict[str, str] = {}
    for flight in flights:
        airlines[flight.airline] = flight.airline
        locations[flight.departure.code] = flight.departure.city
        locations[flight.arrival.code] = flight.arrival.city
        for segment in flight.segments:
            airlines.setdefault(segment.carrier_code, segment.carrier_code)
            locations.setdefault(segment.departure.iata_code, segment.departure.iata_code)
            locations.setdefault(segment.arrival.iata_code, segment.arrival.iata_code)
    return {"airlines": airlines, "locations": locations}
