"""
Port interfaces for the flight result pipeline.

Ports define the abstract interfaces (ABCs and Protocols) the services
use to talk to providers, annotators and caches. This follows the
Ports and Adapters (Hexagonal) architecture pattern.
"""

from flight_results.ports.flight_aggregator import FlightAggregator
from flight_results.ports.flight_annotator import FlightEnricher, FlightPredictor
from flight_results.ports.price_history_source import PriceHistorySource
from flight_results.ports.search_cache import SearchCache

__all__ = [
    "FlightAggregator",
    "FlightEnricher",
    "FlightPredictor",
    "PriceHistorySource",
    "SearchCache",
]
