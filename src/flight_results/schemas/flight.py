"""
Canonical flight offer schema.

Every provider payload (Amadeus, Duffel) is mapped into a ``Flight`` before
it enters the pipeline. Flights are immutable: enrichment and analysis
stages return new values via ``dataclasses.replace`` because several
consumers hold references to the same collection.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


class CabinClass(str, Enum):
    """Cabin class of an offer."""

    ECONOMY = "ECONOMY"
    PREMIUM_ECONOMY = "PREMIUM_ECONOMY"
    BUSINESS = "BUSINESS"
    FIRST = "FIRST"

    @classmethod
    def parse(cls, value: Optional[str]) -> "CabinClass":
        """
        Parse a cabin class case-insensitively.

        Args:
            value: Raw value such as 'economy' or 'BUSINESS'.

        Returns:
            Matching CabinClass, ECONOMY when value is empty.

        Raises:
            ValueError: If value is not a known cabin class.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.ECONOMY
        return cls(value.strip().upper())


@dataclass(frozen=True)
class FlightEndpoint:
    """Departure or arrival of an itinerary (local wall-clock time)."""

    code: str
    city: str
    time: str


@dataclass(frozen=True)
class SegmentEndpoint:
    """Departure or arrival of a single physical segment."""

    iata_code: str
    at: str
    terminal: Optional[str] = None


@dataclass(frozen=True)
class Segment:
    """One physical aircraft movement."""

    departure: SegmentEndpoint
    arrival: SegmentEndpoint
    carrier_code: str
    number: str
    duration: str = ""
    aircraft: Optional[str] = None


@dataclass(frozen=True)
class Layover:
    """Gap between two consecutive segments."""

    airport: str
    duration: int  # minutes


@dataclass(frozen=True)
class Baggage:
    """Included checked baggage allowance."""

    quantity: Optional[int] = None
    weight: Optional[float] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class Itinerary:
    """Return leg of a round trip, same shape as the outbound."""

    departure: FlightEndpoint
    arrival: FlightEndpoint
    duration: str
    stops: int
    segments: Tuple[Segment, ...] = ()
    layovers: Tuple[Layover, ...] = ()


@dataclass(frozen=True)
class TrueCost:
    """Fare plus the ancillary fees a traveller will realistically pay."""

    base_fare: float
    baggage_fee: float
    seat_selection_fee: float
    total: float


@dataclass(frozen=True)
class Vibe:
    """Aircraft comfort rating."""

    score: float  # 0-10
    aircraft: str
    description: str
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PersonaScores:
    """Per-persona suitability scores (0-100)."""

    road_warrior: float = 0.0
    vibe_scout: float = 0.0
    budget_master: float = 0.0


@dataclass(frozen=True)
class FlightAnnotation:
    """Batch-relative annotation attached by the strategist stage."""

    tags: Tuple[str, ...] = ()
    persona_scores: PersonaScores = field(default_factory=PersonaScores)


@dataclass(frozen=True)
class Prediction:
    """Legacy price prediction attached by the predictor stage."""

    trajectory: str
    recommendation: str
    confidence: float
    details: str


@dataclass(frozen=True)
class Flight:
    """
    Immutable normalized flight offer.

    Attributes:
        id: Provider-assigned identifier, unique within a result set.
        airline: Validating/marketing carrier IATA code.
        flight_number: Carrier code + number of the first segment.
        departure: Outbound departure (airport, city, local ISO time).
        arrival: Outbound arrival (airport, city, local ISO time).
        duration: Raw duration token ('PT2H30M', '2h30m').
        stops: Number of intermediate stops.
        price: Total price in the result set's currency.
        cabin_class: Cabin of the offer.
        segments: Ordered physical segments of the outbound.
        layovers: One entry between each consecutive segment pair.
        baggage: Included baggage allowance, if known.
        return_flight: Return leg for round trips.
        true_cost: Enrichment - fare plus estimated fees.
        vibe: Enrichment - aircraft comfort rating.
        analysis: Strategist tags and persona scores.
        prediction: Legacy prediction annotation.
    """

    id: str
    airline: str
    flight_number: str
    departure: FlightEndpoint
    arrival: FlightEndpoint
    duration: str
    stops: int
    price: float
    cabin_class: CabinClass = CabinClass.ECONOMY
    segments: Tuple[Segment, ...] = ()
    layovers: Tuple[Layover, ...] = ()
    baggage: Optional[Baggage] = None
    return_flight: Optional[Itinerary] = None
    true_cost: Optional[TrueCost] = None
    vibe: Optional[Vibe] = None
    analysis: Optional[FlightAnnotation] = None
    prediction: Optional[Prediction] = None

    def __post_init__(self) -> None:
        """Validate structural invariants."""
        if self.price < 0:
            raise ValueError(f"price must be >= 0, got {self.price}")
        if self.stops < 0:
            raise ValueError(f"stops must be >= 0, got {self.stops}")
        if self.segments:
            expected = len(self.segments) - 1
            if self.stops != expected:
                raise ValueError(
                    f"Flight {self.id}: stops ({self.stops}) must equal "
                    f"segments - 1 ({expected})"
                )
            if len(self.layovers) != expected:
                raise ValueError(
                    f"Flight {self.id}: expected {expected} layovers, "
                    f"got {len(self.layovers)}"
                )
        if self.true_cost is not None and self.true_cost.base_fare != self.price:
            raise ValueError(
                f"Flight {self.id}: true_cost.base_fare ({self.true_cost.base_fare}) "
                f"must equal price ({self.price})"
            )

    @property
    def duration_minutes(self) -> int:
        """Total duration in minutes (0 when the token is malformed)."""
        from flight_results.services.duration_codec import parse_duration

        return parse_duration(self.duration)

    @property
    def departure_date(self) -> str:
        """Local calendar date of departure ('YYYY-MM-DD')."""
        return self.departure.time.split("T")[0]

    @property
    def vibe_score(self) -> Optional[float]:
        return self.vibe.score if self.vibe is not None else None

    def with_annotations(self, **changes) -> "Flight":
        """Return a copy carrying additional enrichment/analysis fields."""
        return replace(self, **changes)
