"""
Flight Aggregator port interface.

Defines the contract for upstream providers that turn a search intent
into canonical flights. Provider payload shapes never leave the adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flight_results.schemas.search import AggregationResult, SearchIntent


class FlightAggregator(ABC):
    """
    Abstract interface for flight search providers.

    Implementations:
    - AmadeusFlightAggregator: Amadeus Flight Offers Search
    - DuffelFlightAggregator: Duffel offer requests
    """

    @abstractmethod
    async def aggregate(self, intent: SearchIntent) -> AggregationResult:
        """
        Search the provider and normalise its offers.

        Args:
            intent: Validated trip parameters.

        Returns:
            Canonical flights plus code dictionaries (passed through
            to the response unmodified).

        Raises:
            ProviderError: If the provider call fails.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g., "amadeus")."""
        ...
