"""
Aircraft comfort catalogue.

Maps IATA aircraft type codes to a display name, a 0-10 comfort
("vibe") score and descriptive cabin tags.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class BodyType(str, Enum):
    WIDE = "wide"
    NARROW = "narrow"
    REGIONAL = "regional"


@dataclass(frozen=True)
class AircraftDetails:
    """Comfort profile of an aircraft type."""

    name: str
    vibe: float
    tags: Tuple[str, ...]
    body_type: BodyType


def _aircraft(name: str, vibe: float, tags: Tuple[str, ...], body: BodyType) -> AircraftDetails:
    return AircraftDetails(name=name, vibe=vibe, tags=tags, body_type=body)


AIRCRAFT_CATALOG: Dict[str, AircraftDetails] = {
    # Boeing
    "787": _aircraft("Boeing 787 Dreamliner", 9.2, ("Mood Lighting", "Quiet Cabin", "Large Windows"), BodyType.WIDE),
    "788": _aircraft("Boeing 787-8 Dreamliner", 9.0, ("Mood Lighting", "Quiet Cabin"), BodyType.WIDE),
    "789": _aircraft("Boeing 787-9 Dreamliner", 9.4, ("Mood Lighting", "Quiet Cabin"), BodyType.WIDE),
    "777": _aircraft("Boeing 777", 8.5, ("Spacious", "Reliable"), BodyType.WIDE),
    "77W": _aircraft("Boeing 777-300ER", 8.8, ("Spacious", "Smooth Ride"), BodyType.WIDE),
    "737": _aircraft("Boeing 737", 6.0, ("Standard",), BodyType.NARROW),
    "738": _aircraft("Boeing 737-800", 6.5, ("Standard",), BodyType.NARROW),
    "73H": _aircraft("Boeing 737-800 (Winglets)", 6.8, ("Modern Interior",), BodyType.NARROW),
    "7M8": _aircraft("Boeing 737 MAX 8", 7.5, ("Modern", "Sky Interior"), BodyType.NARROW),
    # Airbus
    "380": _aircraft("Airbus A380", 9.8, ("Super Jumbo", "Silent", "Bar/Lounge Potential"), BodyType.WIDE),
    "350": _aircraft("Airbus A350", 9.6, ("Extra Wide", "Quiet", "Fresh Air"), BodyType.WIDE),
    "359": _aircraft("Airbus A350-900", 9.6, ("Extra Wide", "Quiet"), BodyType.WIDE),
    "351": _aircraft("Airbus A350-1000", 9.7, ("Flagship", "Quiet"), BodyType.WIDE),
    "330": _aircraft("Airbus A330", 7.8, ("2-4-2 Layout",), BodyType.WIDE),
    "339": _aircraft("Airbus A330-900neo", 8.9, ("Airspace Cabin", "Quiet"), BodyType.WIDE),
    "320": _aircraft("Airbus A320", 6.5, ("Standard",), BodyType.NARROW),
    "32N": _aircraft("Airbus A320neo", 7.8, ("Modern", "Quiet Engines"), BodyType.NARROW),
    "321": _aircraft("Airbus A321", 6.5, ("Standard",), BodyType.NARROW),
    "32Q": _aircraft("Airbus A321neo", 7.8, ("Modern",), BodyType.NARROW),
    "220": _aircraft("Airbus A220", 9.0, ("Huge Windows", "2-3 Layout", "Spacious"), BodyType.NARROW),
    "223": _aircraft("Airbus A220-300", 9.0, ("Huge Windows", "Spacious"), BodyType.NARROW),
    # Embraer / Bombardier
    "E90": _aircraft("Embraer E190", 7.5, ("No Middle Seat", "2-2 Layout"), BodyType.REGIONAL),
    "E95": _aircraft("Embraer E195", 7.5, ("No Middle Seat",), BodyType.REGIONAL),
    "E75": _aircraft("Embraer E175", 7.2, ("No Middle Seat", "Quick Boarding"), BodyType.REGIONAL),
    "CR9": _aircraft("CRJ-900", 5.5, ("Tight", "Fast"), BodyType.REGIONAL),
    "CRK": _aircraft("CRJ-1000", 5.8, ("Regional",), BodyType.REGIONAL),
    # Ground transport
    "BUS": _aircraft("Bus / Train", 4.0, ("Ground Transport",), BodyType.REGIONAL),
    "TRN": _aircraft("Train", 5.0, ("Rail Service",), BodyType.REGIONAL),
}

DEFAULT_AIRCRAFT = _aircraft("Standard Aircraft", 6.0, (), BodyType.NARROW)


def lookup_aircraft(code: Optional[str]) -> AircraftDetails:
    """
    Resolve an aircraft code: exact match, then its 3-character prefix,
    then DEFAULT_AIRCRAFT.
    """
    code = (code or "").strip().upper()
    return AIRCRAFT_CATALOG.get(code) or AIRCRAFT_CATALOG.get(code[:3]) or DEFAULT_AIRCRAFT
