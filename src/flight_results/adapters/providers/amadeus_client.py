"""
Amadeus adapters - flight offers and cheapest-date history.

Uses an async HTTP client with OAuth2 client-credentials token caching,
concurrency limiting and exponential backoff on rate limits and
timeouts.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import httpx
import pandas as pd

from flight_results.adapters.providers.amadeus_mapper import apply_aggregation_rules
from flight_results.adapters.providers.normalize import normalize_offers
from flight_results.adapters.providers.offers import AmadeusOffer
from flight_results.config import ProviderConfig, ProviderCredentials
from flight_results.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderTimeoutError,
)
from flight_results.ports.flight_aggregator import FlightAggregator
from flight_results.ports.price_history_source import PriceHistorySource
from flight_results.schemas.price_history import (
    PRICE_HISTORY_COLUMNS,
    PriceHistoryFrame,
    PriceHistorySchema,
    empty_price_history,
)
from flight_results.schemas.search import AggregationResult, SearchIntent

logger = logging.getLogger(__name__)

PROVIDER = "amadeus"
TOKEN_PATH = "/v1/security/oauth2/token"
FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"
FLIGHT_DATES_PATH = "/v1/shopping/flight-dates"

# Refresh the token this many seconds before Amadeus expires it
TOKEN_EXPIRY_MARGIN_S = 60


class AmadeusClient:
    """
    Minimal async Amadeus Self-Service REST client.

    Attributes:
        _credentials: API key / secret and base URL.
        _config: HTTP behaviour (timeouts, retries, concurrency).
        _client: Lazily created async HTTP client.
        _semaphore: Concurrency limiter.
        _token: Cached access token.
        _token_expires_at: perf_counter deadline of the cached token.
    """

    def __init__(
        self,
        credentials: Optional[ProviderCredentials] = None,
        config: Optional[ProviderConfig] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            credentials: Amadeus credentials. If None, read from environment.
            config: Provider config. If None, uses defaults.
        """
        self._credentials = credentials or ProviderCredentials.from_env()
        if not self._credentials.has_amadeus:
            logger.warning("AMADEUS_API_KEY / AMADEUS_API_SECRET not set - Amadeus calls will fail")

        self._config = config or ProviderConfig()
        self._semaphore = asyncio.Semaphore(self._config.max_concurrent_requests)
        self._token: Optional[str] = None
        self._token_expires_at = 0.0

        # Lazy-initialized client
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._credentials.amadeus_base_url,
                headers={"Accept": "application/json"},
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

    async def _get_token(self, force: bool = False) -> str:
        """Return a valid access token, fetching a new one when needed."""
        if not force and self._token and time.perf_counter() < self._token_expires_at:
            return self._token

        if not self._credentials.has_amadeus:
            raise ProviderAuthError(PROVIDER, "credentials not configured")

        client = await self._get_client()
        response = await client.post(
            TOKEN_PATH,
            data={
                "grant_type": "client_credentials",
                "client_id": self._credentials.amadeus_api_key,
                "client_secret": self._credentials.amadeus_api_secret,
            },
        )
        if response.status_code != 200:
            raise ProviderAuthError(
                PROVIDER, "token request failed", status_code=response.status_code
            )

        payload = response.json()
        expires_in = int(payload.get("expires_in", 1799))
        self._token = payload["access_token"]
        self._token_expires_at = time.perf_counter() + expires_in - TOKEN_EXPIRY_MARGIN_S
        logger.debug("Fetched Amadeus token (expires in %ds)", expires_in)
        return self._token

    async def get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Authenticated GET with retries.

        Refreshes the token once on 401; backs off exponentially on 429
        and timeouts.

        Raises:
            ProviderAuthError: If authentication fails.
            ProviderTimeoutError: If every attempt timed out.
            ProviderError: For any other non-success status.
        """
        async with self._semaphore:
            return await self._get_impl(path, params)

    async def _get_impl(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        client = await self._get_client()
        retries = 0
        backoff = self._config.initial_backoff_s
        refreshed = False

        while True:
            token = await self._get_token()
            try:
                response = await client.get(
                    path,
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                )
            except httpx.TimeoutException as e:
                retries += 1
                if retries > self._config.max_retries:
                    logger.error("Amadeus timeout after %d retries: %s", retries - 1, path)
                    raise ProviderTimeoutError(PROVIDER, f"timeout on {path}") from e
                await asyncio.sleep(backoff)
                backoff *= self._config.backoff_multiplier
                continue

            if response.status_code == 200:
                return response.json()

            if response.status_code == 401 and not refreshed:
                # Token revoked or expired early
                refreshed = True
                await self._get_token(force=True)
                continue

            if response.status_code == 429 and retries < self._config.max_retries:
                retries += 1
                logger.warning(
                    "Rate limited by Amadeus, retry %d/%d in %.1fs",
                    retries,
                    self._config.max_retries,
                    backoff,
                )
                await asyncio.sleep(backoff)
                backoff *= self._config.backoff_multiplier
                continue

            logger.error(
                "Amadeus API error: %d %s",
                response.status_code,
                response.text[:200],
            )
            error_type = ProviderAuthError if response.status_code == 401 else ProviderError
            raise error_type(PROVIDER, f"GET {path} failed", status_code=response.status_code)


class AmadeusFlightAggregator(FlightAggregator):
    """FlightAggregator backed by Amadeus Flight Offers Search."""

    def __init__(
        self,
        client: AmadeusClient,
        config: Optional[ProviderConfig] = None,
    ) -> None:
        self._client = client
        self._config = config or ProviderConfig()

    @property
    def name(self) -> str:
        return PROVIDER

    def _build_params(self, intent: SearchIntent) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "originLocationCode": intent.origin,
            "destinationLocationCode": intent.destination,
            "departureDate": intent.date,
            "adults": intent.adults,
            "travelClass": intent.cabin_class.value,
            "max": self._config.max_results,
        }
        if intent.return_date:
            params["returnDate"] = intent.return_date
        if intent.children:
            params["children"] = intent.children
        if intent.infants:
            params["infants"] = intent.infants
        return params

    async def aggregate(self, intent: SearchIntent) -> AggregationResult:
        """
        Search Amadeus and map its offers.

        Returns:
            Deduplicated flights plus the response dictionaries.
        """
        start_time = time.perf_counter()
        data = await self._client.get(FLIGHT_OFFERS_PATH, self._build_params(intent))

        raw_offers: List[Dict[str, Any]] = data.get("data") or []
        offers = [AmadeusOffer(payload=o, cabin_class=intent.cabin_class) for o in raw_offers]
        flights = apply_aggregation_rules(normalize_offers(offers))

        logger.info(
            "Amadeus %s->%s: %d offers, %d flights in %.0fms",
            intent.origin,
            intent.destination,
            len(raw_offers),
            len(flights),
            (time.perf_counter() - start_time) * 1000,
        )
        return AggregationResult(flights=flights, dictionaries=data.get("dictionaries") or {})


class AmadeusPriceHistorySource(PriceHistorySource):
    """
    PriceHistorySource backed by Amadeus Flight Cheapest Date Search.

    Each cheapest-date item becomes one row with price = min = max.
    """

    def __init__(self, client: AmadeusClient) -> None:
        self._client = client

    async def get_price_history(self, origin: str, destination: str) -> PriceHistoryFrame:
        """Fetch and validate the cheapest-date series for a route."""
        data = await self._client.get(
            FLIGHT_DATES_PATH,
            {"origin": origin, "destination": destination},
        )
        items = data.get("data") or []
        if not items:
            return empty_price_history()

        rows = []
        for item in items:
            try:
                price = float(item["price"]["total"])
                rows.append((item["departureDate"], price, price, price))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("Skipping malformed cheapest-date item: %s", e)

        if not rows:
            return empty_price_history()
        frame = pd.DataFrame(rows, columns=PRICE_HISTORY_COLUMNS)
        return PriceHistorySchema.validate(frame)
