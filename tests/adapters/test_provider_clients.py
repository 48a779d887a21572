"""
Tests for the Amadeus and Duffel HTTP adapters.

Uses respx to mock httpx at the transport level.

Tests cover:
- OAuth2 token fetch and caching (Amadeus)
- Request parameters / payload shape
- Retry on 429 and timeouts, error mapping
- Cheapest-date history -> validated DataFrame
"""

import json

import httpx
import pytest
import respx

from flight_results.adapters.providers.amadeus_client import (
    FLIGHT_DATES_PATH,
    FLIGHT_OFFERS_PATH,
    TOKEN_PATH,
    AmadeusClient,
    AmadeusFlightAggregator,
    AmadeusPriceHistorySource,
)
from flight_results.adapters.providers.duffel_client import (
    OFFER_REQUESTS_PATH,
    DuffelFlightAggregator,
)
from flight_results.config import (
    AMADEUS_TEST_BASE_URL,
    DUFFEL_API_URL,
    ProviderConfig,
    ProviderCredentials,
)
from flight_results.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderTimeoutError,
)
from flight_results.schemas.search import SearchIntent


# =============================================================================
# FIXTURES
# =============================================================================


FAST_RETRY = ProviderConfig(initial_backoff_s=0.0, max_retries=2)

TOKEN_RESPONSE = {"access_token": "tok-123", "expires_in": 1799, "token_type": "Bearer"}

AMADEUS_OFFERS = {
    "data": [
        {
            "id": "1",
            "itineraries": [
                {
                    "duration": "PT7H05M",
                    "segments": [
                        {
                            "departure": {"iataCode": "LHR", "at": "2026-07-01T10:00:00"},
                            "arrival": {"iataCode": "JFK", "at": "2026-07-01T13:05:00"},
                            "carrierCode": "BA",
                            "number": "117",
                            "aircraft": {"code": "77W"},
                            "duration": "PT7H05M",
                        }
                    ],
                }
            ],
            "price": {"currency": "USD", "total": "612.30"},
            "travelerPricings": [],
        }
    ],
    "dictionaries": {"carriers": {"BA": "BRITISH AIRWAYS"}},
}

DUFFEL_OFFERS = {
    "data": {
        "id": "orq_1",
        "offers": [
            {
                "id": "off_1",
                "owner": {"iata_code": "LH"},
                "total_amount": "455.00",
                "cabin_class": "economy",
                "slices": [
                    {
                        "duration": "PT1H40M",
                        "segments": [
                            {
                                "origin": {"iata_code": "FRA", "city_name": "Frankfurt"},
                                "destination": {"iata_code": "LHR", "city_name": "London"},
                                "departing_at": "2026-07-01T09:00:00",
                                "arriving_at": "2026-07-01T09:40:00",
                                "operating_carrier": {"iata_code": "LH"},
                                "operating_carrier_flight_number": "900",
                                "aircraft": {"iata_code": "32N"},
                                "duration": "PT1H40M",
                            }
                        ],
                    }
                ],
            }
        ],
    }
}


@pytest.fixture
def credentials() -> ProviderCredentials:
    return ProviderCredentials(amadeus_api_key="key", amadeus_api_secret="secret")


@pytest.fixture
def intent() -> SearchIntent:
    return SearchIntent.create(
        "LHR", "JFK", "2026-07-01", return_date="2026-07-10", adults=2, infants=1
    )


# =============================================================================
# AMADEUS
# =============================================================================


class TestAmadeusClient:
    """Tests for authentication and retries."""

    @pytest.mark.anyio
    async def test_aggregate(self, credentials, intent):
        client = AmadeusClient(credentials, FAST_RETRY)
        aggregator = AmadeusFlightAggregator(client, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            token = mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            offers = mock.get(FLIGHT_OFFERS_PATH).respond(200, json=AMADEUS_OFFERS)

            result = await aggregator.aggregate(intent)

        await client.close()

        assert aggregator.name == "amadeus"
        assert [f.id for f in result.flights] == ["1"]
        assert result.flights[0].price == 612.30
        assert result.dictionaries == {"carriers": {"BA": "BRITISH AIRWAYS"}}

        assert b"grant_type=client_credentials" in token.calls.last.request.content
        request = offers.calls.last.request
        assert request.headers["Authorization"] == "Bearer tok-123"
        params = request.url.params
        assert params["originLocationCode"] == "LHR"
        assert params["returnDate"] == "2026-07-10"
        assert params["adults"] == "2"
        assert params["infants"] == "1"
        assert "children" not in params
        assert params["travelClass"] == "ECONOMY"

    @pytest.mark.anyio
    async def test_token_is_cached(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            token = mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            mock.get(FLIGHT_DATES_PATH).respond(200, json={"data": []})

            await client.get(FLIGHT_DATES_PATH, {})
            await client.get(FLIGHT_DATES_PATH, {})

        await client.close()
        assert token.call_count == 1

    @pytest.mark.anyio
    async def test_rate_limit_retried(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            route = mock.get(FLIGHT_OFFERS_PATH).mock(
                side_effect=[httpx.Response(429), httpx.Response(200, json={"data": []})]
            )

            data = await client.get(FLIGHT_OFFERS_PATH, {})

        await client.close()
        assert data == {"data": []}
        assert route.call_count == 2

    @pytest.mark.anyio
    async def test_rate_limit_exhausted(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            route = mock.get(FLIGHT_OFFERS_PATH).respond(429)

            with pytest.raises(ProviderError) as exc_info:
                await client.get(FLIGHT_OFFERS_PATH, {})

        await client.close()
        assert exc_info.value.status_code == 429
        assert route.call_count == FAST_RETRY.max_retries + 1

    @pytest.mark.anyio
    async def test_server_error(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            mock.get(FLIGHT_OFFERS_PATH).respond(500, text="internal")

            with pytest.raises(ProviderError) as exc_info:
                await client.get(FLIGHT_OFFERS_PATH, {})

        await client.close()
        assert exc_info.value.status_code == 500
        assert exc_info.value.provider == "amadeus"
        assert not isinstance(exc_info.value, ProviderAuthError)

    @pytest.mark.anyio
    async def test_unauthorized_refreshes_token_once(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            token = mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            mock.get(FLIGHT_OFFERS_PATH).respond(401)

            with pytest.raises(ProviderAuthError):
                await client.get(FLIGHT_OFFERS_PATH, {})

        await client.close()
        assert token.call_count == 2

    @pytest.mark.anyio
    async def test_token_rejected(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            mock.post(TOKEN_PATH).respond(401, json={"error": "invalid_client"})

            with pytest.raises(ProviderAuthError):
                await client.get(FLIGHT_OFFERS_PATH, {})

        await client.close()

    @pytest.mark.anyio
    async def test_missing_credentials(self):
        client = AmadeusClient(ProviderCredentials(), FAST_RETRY)
        with pytest.raises(ProviderAuthError):
            await client.get(FLIGHT_OFFERS_PATH, {})
        await client.close()

    @pytest.mark.anyio
    async def test_timeouts_exhausted(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            route = mock.get(FLIGHT_OFFERS_PATH).mock(side_effect=httpx.ReadTimeout)

            with pytest.raises(ProviderTimeoutError):
                await client.get(FLIGHT_OFFERS_PATH, {})

        await client.close()
        assert route.call_count == FAST_RETRY.max_retries + 1


class TestAmadeusPriceHistorySource:
    """Tests for the cheapest-date history adapter."""

    @pytest.mark.anyio
    async def test_history_frame(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)
        source = AmadeusPriceHistorySource(client)
        payload = {
            "data": [
                {"departureDate": "2026-07-01", "price": {"total": "410.00"}},
                {"departureDate": "2026-07-02", "price": {"total": "385.50"}},
                {"departureDate": "2026-07-03"},
            ]
        }

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            route = mock.get(FLIGHT_DATES_PATH).respond(200, json=payload)

            frame = await source.get_price_history("LHR", "JFK")

        await client.close()

        assert route.calls.last.request.url.params["origin"] == "LHR"
        assert list(frame["date"]) == ["2026-07-01", "2026-07-02"]
        assert frame["price"].iloc[1] == 385.5
        assert frame["min"].iloc[1] == frame["max"].iloc[1] == 385.5

    @pytest.mark.anyio
    async def test_empty_history(self, credentials):
        client = AmadeusClient(credentials, FAST_RETRY)
        source = AmadeusPriceHistorySource(client)

        with respx.mock(base_url=AMADEUS_TEST_BASE_URL) as mock:
            mock.post(TOKEN_PATH).respond(200, json=TOKEN_RESPONSE)
            mock.get(FLIGHT_DATES_PATH).respond(200, json={"data": []})

            frame = await source.get_price_history("LHR", "JFK")

        await client.close()
        assert frame.empty


# =============================================================================
# DUFFEL
# =============================================================================


class TestDuffelFlightAggregator:
    """Tests for the Duffel offer request adapter."""

    @pytest.mark.anyio
    async def test_aggregate(self, intent):
        aggregator = DuffelFlightAggregator(api_token="duffel_test_abc", config=FAST_RETRY)

        with respx.mock(base_url=DUFFEL_API_URL) as mock:
            route = mock.post(OFFER_REQUESTS_PATH).respond(201, json=DUFFEL_OFFERS)
            result = await aggregator.aggregate(intent)

        await aggregator.close()

        assert aggregator.name == "duffel"
        assert [f.id for f in result.flights] == ["off_1"]
        assert result.dictionaries["locations"]["FRA"] == "Frankfurt"

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer duffel_test_abc"
        assert request.headers["Duffel-Version"] == "v2"
        assert request.url.params["return_offers"] == "true"
        body = json.loads(request.content)["data"]
        assert len(body["slices"]) == 2
        assert body["slices"][1]["origin"] == "JFK"
        assert body["passengers"] == [{"type": "adult"}, {"type": "adult"}, {"age": 1}]
        assert body["cabin_class"] == "economy"

    @pytest.mark.anyio
    async def test_missing_token(self, intent, monkeypatch):
        monkeypatch.delenv("DUFFEL_ACCESS_TOKEN", raising=False)
        aggregator = DuffelFlightAggregator(api_token="", config=FAST_RETRY)
        with pytest.raises(ProviderAuthError):
            await aggregator.aggregate(intent)

    @pytest.mark.anyio
    async def test_forbidden(self, intent):
        aggregator = DuffelFlightAggregator(api_token="bad", config=FAST_RETRY)

        with respx.mock(base_url=DUFFEL_API_URL) as mock:
            mock.post(OFFER_REQUESTS_PATH).respond(403, json={"errors": []})
            with pytest.raises(ProviderAuthError) as exc_info:
                await aggregator.aggregate(intent)

        await aggregator.close()
        assert exc_info.value.status_code == 403

    @pytest.mark.anyio
    async def test_rate_limit_retried(self, intent):
        aggregator = DuffelFlightAggregator(api_token="tok", config=FAST_RETRY)

        with respx.mock(base_url=DUFFEL_API_URL) as mock:
            route = mock.post(OFFER_REQUESTS_PATH).mock(
                side_effect=[httpx.Response(429), httpx.Response(200, json=DUFFEL_OFFERS)]
            )
            result = await aggregator.aggregate(intent)

        await aggregator.close()
        assert route.call_count == 2
        assert len(result.flights) == 1
