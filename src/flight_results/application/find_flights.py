"""
FindFlights Use Case - Public API for flight searches.

This module provides the main entry point for the result pipeline. It
acts as a Facade/Factory, wiring providers, cache and annotation stages
with sensible defaults and exposing a single search method.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from flight_results.adapters.cache.in_memory_search_cache import InMemorySearchCache
from flight_results.adapters.enrichment.aircraft_enricher import AircraftEnricher
from flight_results.adapters.enrichment.strategist_predictor import StrategistPredictor
from flight_results.adapters.providers.amadeus_client import (
    AmadeusClient,
    AmadeusFlightAggregator,
    AmadeusPriceHistorySource,
)
from flight_results.adapters.providers.duffel_client import DuffelFlightAggregator
from flight_results.config import ProviderCredentials, Settings
from flight_results.ports.flight_aggregator import FlightAggregator
from flight_results.ports.price_history_source import PriceHistorySource
from flight_results.ports.search_cache import SearchCache
from flight_results.schemas.criteria import FilterCriteria, SortOption
from flight_results.schemas.search import Pagination, SearchIntent, SearchResponse
from flight_results.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)


class FindFlights:
    """
    Public API for paginated, filtered flight searches.

    Example usage:
        >>> finder = FindFlights()
        >>> intent = SearchIntent.create("LHR", "JFK", "2026-07-01")
        >>> response = await finder.search(intent, Pagination(page=2))
        >>> response.pagination.total_count

    Attributes:
        _orchestrator: Underlying SearchOrchestrator.
        _amadeus: Amadeus client, when Amadeus is the provider (for shutdown).
        _aggregator: Flight search provider (for shutdown).
    """

    def __init__(
        self,
        aggregator: Optional[FlightAggregator] = None,
        history_source: Optional[PriceHistorySource] = None,
        cache: Optional[SearchCache] = None,
        credentials: Optional[ProviderCredentials] = None,
        settings: type[Settings] = Settings,
    ) -> None:
        """
        Initialize the finder with optional custom dependencies.

        Args:
            aggregator: Custom provider. If None, Amadeus when its keys are
                set, otherwise Duffel.
            history_source: Custom history source. If None, Amadeus
                cheapest dates when Amadeus is configured.
            cache: Custom cache. If None, a fresh InMemorySearchCache.
            credentials: Provider credentials. If None, read from environment.
            settings: Configuration container.
        """
        self._amadeus: Optional[AmadeusClient] = None

        if aggregator is None or history_source is None:
            credentials = credentials or ProviderCredentials.from_env()
            if credentials.has_amadeus or not credentials.has_duffel:
                self._amadeus = AmadeusClient(credentials, settings.provider)
                aggregator = aggregator or AmadeusFlightAggregator(
                    self._amadeus, settings.provider
                )
                history_source = history_source or AmadeusPriceHistorySource(self._amadeus)
            else:
                aggregator = aggregator or DuffelFlightAggregator(
                    credentials.duffel_access_token, settings.provider
                )

        self._aggregator = aggregator
        self._orchestrator = SearchOrchestrator(
            aggregator=aggregator,
            cache=cache if cache is not None else InMemorySearchCache.from_config(settings.cache),
            history_source=history_source,
            enricher=AircraftEnricher(),
            predictor=StrategistPredictor(),
            config=settings.pipeline,
        )

        logger.info("FindFlights initialized with %s provider", aggregator.name)

    async def search(
        self,
        intent: SearchIntent,
        pagination: Optional[Pagination] = None,
        criteria: Optional[FilterCriteria] = None,
        sort: Union[SortOption, str, None] = None,
    ) -> SearchResponse:
        """
        Search flights and return one page of results.

        Args:
            intent: Trip parameters.
            pagination: Page request (default first page).
            criteria: Filters (default none).
            sort: Sort strategy (default best).

        Returns:
            SearchResponse envelope.
        """
        return await self._orchestrator.search(intent, pagination, criteria, sort)

    async def close(self) -> None:
        """Release HTTP clients."""
        if self._amadeus is not None:
            await self._amadeus.close()
        if isinstance(self._aggregator, DuffelFlightAggregator):
            await self._aggregator.close()
