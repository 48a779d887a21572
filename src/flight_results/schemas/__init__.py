"""
Schema definitions for the flight result pipeline.

Frozen dataclasses for the canonical entities; a Pandera DataFrame
contract for the historical price series.
"""

from .analysis import (
    FlightAnalysis,
    FlightInsight,
    MarketSource,
    Opportunity,
    OpportunityType,
    RecommendationType,
)
from .criteria import FilterCriteria, SortOption
from .facets import FilterOptions
from .flight import (
    Baggage,
    CabinClass,
    Flight,
    FlightAnnotation,
    FlightEndpoint,
    Itinerary,
    Layover,
    PersonaScores,
    Prediction,
    Segment,
    SegmentEndpoint,
    TrueCost,
    Vibe,
)
from .price_history import (
    IntradayMetric,
    MergedPricePoint,
    PriceHistoryFrame,
    PriceHistorySchema,
    PricePoint,
    PriceSource,
    empty_price_history,
)
from .search import (
    AggregationResult,
    PageInfo,
    Pagination,
    RawSearchResult,
    SearchIntent,
    SearchResponse,
)

__all__ = [
    # Flight
    "Baggage",
    "CabinClass",
    "Flight",
    "FlightAnnotation",
    "FlightEndpoint",
    "Itinerary",
    "Layover",
    "PersonaScores",
    "Prediction",
    "Segment",
    "SegmentEndpoint",
    "TrueCost",
    "Vibe",
    # Criteria and facets
    "FilterCriteria",
    "FilterOptions",
    "SortOption",
    # Analysis
    "FlightAnalysis",
    "FlightInsight",
    "MarketSource",
    "Opportunity",
    "OpportunityType",
    "RecommendationType",
    # Price history
    "IntradayMetric",
    "MergedPricePoint",
    "PriceHistoryFrame",
    "PriceHistorySchema",
    "PricePoint",
    "PriceSource",
    "empty_price_history",
    # Search envelope
    "AggregationResult",
    "PageInfo",
    "Pagination",
    "RawSearchResult",
    "SearchIntent",
    "SearchResponse",
]
