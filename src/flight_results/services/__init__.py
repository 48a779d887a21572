"""
Domain services for the flight result pipeline.

Pure, provider-independent pipeline stages plus the orchestrator that
composes them for a request.
"""

from flight_results.services.batch_analyzer import (
    analyze_batch,
    annotate_flights,
    generate_flight_analysis,
    recommendation_type,
    tag_flights,
)
from flight_results.services.duration_codec import parse_duration
from flight_results.services.facet_extractor import extract_facets
from flight_results.services.filter_engine import apply_filters
from flight_results.services.price_history_merger import (
    intraday_metrics,
    market_average,
    merge_price_history,
)
from flight_results.services.search_orchestrator import SearchOrchestrator
from flight_results.services.sort_engine import sort_flights

__all__ = [
    "SearchOrchestrator",
    "analyze_batch",
    "annotate_flights",
    "apply_filters",
    "extract_facets",
    "generate_flight_analysis",
    "intraday_metrics",
    "market_average",
    "merge_price_history",
    "parse_duration",
    "recommendation_type",
    "sort_flights",
    "tag_flights",
]
