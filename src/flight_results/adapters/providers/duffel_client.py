"""
Duffel Flight Aggregator - searches Duffel offer requests.

Creates an offer request (one slice, or two for round trips) with
return_offers=true and maps the offers it returns.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from flight_results.adapters.providers.duffel_mapper import build_dictionaries
from flight_results.adapters.providers.normalize import normalize_offers
from flight_results.adapters.providers.offers import DuffelOffer
from flight_results.config import DUFFEL_API_URL, ProviderConfig, ProviderCredentials
from flight_results.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderTimeoutError,
)
from flight_results.ports.flight_aggregator import FlightAggregator
from flight_results.schemas.search import AggregationResult, SearchIntent

logger = logging.getLogger(__name__)

PROVIDER = "duffel"
OFFER_REQUESTS_PATH = "/air/offer_requests"


class DuffelFlightAggregator(FlightAggregator):
    """
    FlightAggregator backed by the Duffel API.

    Attributes:
        _api_token: Duffel API access token.
        _client: Async HTTP client.
        _config: Provider configuration.
        _semaphore: Concurrency limiter.
    """

    def __init__(
        self,
        api_token: Optional[str] = None,
        config: Optional[ProviderConfig] = None,
        base_url: str = DUFFEL_API_URL,
    ) -> None:
        """
        Initialize the Duffel aggregator.

        Args:
            api_token: Duffel API token. If None, reads DUFFEL_ACCESS_TOKEN.
            config: Provider config. If None, uses defaults.
            base_url: API root.
        """
        self._api_token = api_token or ProviderCredentials.from_env().duffel_access_token
        if not self._api_token:
            logger.warning("DUFFEL_ACCESS_TOKEN not set - Duffel searches will fail")

        self._config = config or ProviderConfig()
        self._base_url = base_url
        self._semaphore = asyncio.Semaphore(self._config.max_concurrent_requests)

        # Lazy-initialized client
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "Authorization": f"Bearer {self._api_token}",
                    "Duffel-Version": "v2",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                timeout=httpx.Timeout(
                    self._config.request_timeout_ms / 1000.0,
                    connect=self._config.connect_timeout_s,
                ),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @property
    def name(self) -> str:
        return PROVIDER

    def _build_payload(self, intent: SearchIntent) -> Dict[str, Any]:
        slices = [
            {
                "origin": intent.origin,
                "destination": intent.destination,
                "departure_date": intent.date,
            }
        ]
        if intent.return_date:
            slices.append(
                {
                    "origin": intent.destination,
                    "destination": intent.origin,
                    "departure_date": intent.return_date,
                }
            )

        passengers: List[Dict[str, Any]] = [{"type": "adult"}] * intent.adults
        passengers += [{"age": 8}] * intent.children
        passengers += [{"age": 1}] * intent.infants

        return {
            "data": {
                "slices": slices,
                "passengers": passengers,
                "cabin_class": intent.cabin_class.value.lower(),
            }
        }

    async def aggregate(self, intent: SearchIntent) -> AggregationResult:
        """
        Search Duffel and map its offers.

        Returns:
            Flights plus dictionaries built from the codes they carry.

        Raises:
            ProviderAuthError: If no token is configured or it is rejected.
            ProviderTimeoutError: If every attempt timed out.
            ProviderError: For any other non-success status.
        """
        if not self._api_token:
            raise ProviderAuthError(PROVIDER, "DUFFEL_ACCESS_TOKEN not configured")

        start_time = time.perf_counter()
        async with self._semaphore:
            raw_offers = await self._search_offers(self._build_payload(intent))

        flights = normalize_offers([DuffelOffer(payload=o) for o in raw_offers])

        logger.info(
            "Duffel %s->%s: %d offers, %d flights in %.0fms",
            intent.origin,
            intent.destination,
            len(raw_offers),
            len(flights),
            (time.perf_counter() - start_time) * 1000,
        )
        return AggregationResult(flights=flights, dictionaries=build_dictionaries(flights))

    async def _search_offers(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        POST an offer request.

        Implements retry logic with exponential backoff for rate limits.
        """
        client = await self._get_client()
        retries = 0
        backoff = self._config.initial_backoff_s

        while True:
            try:
                response = await client.post(
                    OFFER_REQUESTS_PATH,
                    json=payload,
                    params={"return_offers": "true"},
                )
            except httpx.TimeoutException as e:
                retries += 1
                if retries > self._config.max_retries:
                    logger.error("Duffel API timeout after %d retries", retries - 1)
                    raise ProviderTimeoutError(PROVIDER, "offer request timed out") from e
                await asyncio.sleep(backoff)
                backoff *= self._config.backoff_multiplier
                continue

            if response.status_code in (200, 201):
                data = response.json()
                return data.get("data", {}).get("offers", [])

            if response.status_code == 429 and retries < self._config.max_retries:
                # Rate limited - back off and retry
                retries += 1
                logger.warning(
                    "Rate limited by Duffel, retry %d/%d in %.1fs",
                    retries,
                    self._config.max_retries,
                    backoff,
                )
                await asyncio.sleep(backoff)
                backoff *= self._config.backoff_multiplier
                continue

            logger.error(
                "Duffel API error: %d %s",
                response.status_code,
                response.text[:200],
            )
            error_type = ProviderAuthError if response.status_code in (401, 403) else ProviderError
            raise error_type(
                PROVIDER, "offer request failed", status_code=response.status_code
            )
