"""Upstream flight-data provider adapters (Amadeus, Duffel)."""

from flight_results.adapters.providers.amadeus_client import (
    AmadeusClient,
    AmadeusFlightAggregator,
    AmadeusPriceHistorySource,
)
from flight_results.adapters.providers.duffel_client import DuffelFlightAggregator
from flight_results.adapters.providers.normalize import normalize_offer
from flight_results.adapters.providers.offers import (
    AmadeusOffer,
    DuffelOffer,
    ProviderOffer,
)

__all__ = [
    "AmadeusClient",
    "AmadeusFlightAggregator",
    "AmadeusOffer",
    "AmadeusPriceHistorySource",
    "DuffelFlightAggregator",
    "DuffelOffer",
    "ProviderOffer",
    "normalize_offer",
]
