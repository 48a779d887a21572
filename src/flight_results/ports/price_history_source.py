"""
Price History Source port interface.

Defines the contract for services providing approximate per-day market
prices for a route, independent of the live search's exact dates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flight_results.schemas.price_history import PriceHistoryFrame


class PriceHistorySource(ABC):
    """Abstract interface for historical price providers."""

    @abstractmethod
    async def get_price_history(
        self,
        origin: str,
        destination: str,
    ) -> PriceHistoryFrame:
        """
        Return the market price series for a route.

        Schema validation (PriceHistorySchema) happens here at the
        boundary.

        Args:
            origin: Origin IATA code.
            destination: Destination IATA code.

        Returns:
            Validated frame, possibly empty.

        Raises:
            ProviderError: If the upstream call fails.
        """
        ...
