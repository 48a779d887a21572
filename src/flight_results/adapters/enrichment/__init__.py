"""Flight enrichment and prediction adapters."""

from flight_results.adapters.enrichment.aircraft_catalog import (
    AIRCRAFT_CATALOG,
    DEFAULT_AIRCRAFT,
    AircraftDetails,
    lookup_aircraft,
)
from flight_results.adapters.enrichment.aircraft_enricher import AircraftEnricher
from flight_results.adapters.enrichment.strategist_predictor import StrategistPredictor

__all__ = [
    "AIRCRAFT_CATALOG",
    "DEFAULT_AIRCRAFT",
    "AircraftDetails",
    "AircraftEnricher",
    "StrategistPredictor",
    "lookup_aircraft",
]
