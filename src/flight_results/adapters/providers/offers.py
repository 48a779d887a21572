"""
Provider offer payloads as an explicit sum type.

Each provider's raw offer is wrapped in its own type and normalised by
its own mapper; nothing past normalize_offer knows which provider a
flight came from.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Sequence, Union

from flight_results.schemas.flight import CabinClass, Layover, Segment
from flight_results.services.duration_codec import parse_duration

Payload = Dict[str, Any]


@dataclass(frozen=True)
class AmadeusOffer:
    """Flight Offers Search item (itineraries / price / travelerPricings)."""

    payload: Payload
    cabin_class: CabinClass = CabinClass.ECONOMY


@dataclass(frozen=True)
class DuffelOffer:
    """Duffel offer (slices / owner / total_amount)."""

    payload: Payload


ProviderOffer = Union[AmadeusOffer, DuffelOffer]


def normalize_duration(token: str) -> str:
    """
    'PT10H05M' -> '10h05m', the display form used across the pipeline.

    Days are folded into hours: 'P1DT2H30M' -> '26h30m'.
    """
    text = (token or "").upper()
    if "D" in text:
        hours, minutes = divmod(parse_duration(text), 60)
        return f"{hours}h{minutes:02d}m"
    return text.replace("PT", "", 1).lower()


def derive_layovers(segments: Sequence[Segment]) -> List[Layover]:
    """
    One layover per consecutive segment pair.

    Duration is the whole minutes between an arrival and the next
    departure, both local times at the same airport.
    """
    layovers = []
    for current, following in zip(segments, segments[1:]):
        arrived = datetime.fromisoformat(current.arrival.at)
        departs = datetime.fromisoformat(following.departure.at)
        minutes = (departs - arrived).total_seconds() / 60
        layovers.append(
            Layover(airport=current.arrival.iata_code, duration=math.floor(minutes))
        )
    return layovers
