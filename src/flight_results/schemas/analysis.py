"""
Batch analysis schemas.

Statistical summary of a filtered result set and the per-flight insight
derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OpportunityType(str, Enum):
    """Kind of pricing opportunity surfaced to the user."""

    SAVINGS = "savings"
    SCARCITY = "scarcity"
    UPGRADE = "upgrade"


class RecommendationType(str, Enum):
    """Three-band classification of a single price against the batch."""

    BUY = "buy"
    MONITOR = "monitor"
    FAIR = "fair"


class MarketSource(str, Enum):
    """Where the reported mean price came from."""

    LOCAL = "local"
    MARKET = "market"


@dataclass(frozen=True)
class Opportunity:
    """Heuristic pricing claim with a human-readable message."""

    type: OpportunityType
    message: str


@dataclass(frozen=True)
class FlightAnalysis:
    """
    Batch statistics over a flight collection.

    Attributes:
        mean_price: Local batch mean, or the historical mean when available.
        standard_deviation: Population stddev of local prices around mean_price.
        cheapest: Id of the lowest-priced flight ('' when empty).
        fastest: Id of the shortest flight ('' when empty).
        best_vibe: Id of the highest comfort score flight ('' when empty).
        opportunity: Optional savings / scarcity claim.
        market_source: Whether mean_price is local or market-anchored.
    """

    mean_price: float = 0.0
    standard_deviation: float = 0.0
    cheapest: str = ""
    fastest: str = ""
    best_vibe: str = ""
    opportunity: Optional[Opportunity] = None
    market_source: MarketSource = MarketSource.LOCAL

    @classmethod
    def empty(cls) -> "FlightAnalysis":
        """Zero-valued analysis for an empty collection."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.cheapest


@dataclass(frozen=True)
class FlightInsight:
    """Natural-language insight for one flight relative to its batch."""

    price_insight: str
    time_insight: str
    prediction: str
    recommendation: RecommendationType
