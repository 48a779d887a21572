"""
Tests for the GET /search endpoint.

Tests cover:
- Query parameter mapping (intent, pagination, filters, sort)
- Response envelope serialisation
- Validation errors (400 for bad values, 422 for missing parameters)
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from flight_results.adapters.enrichment.aircraft_enricher import estimate_true_cost, rate_vibe
from flight_results.api.search_api import app
from flight_results.schemas.criteria import SortOption
from flight_results.schemas.flight import CabinClass
from flight_results.schemas.price_history import PriceHistorySchema
from flight_results.schemas.search import PageInfo, Pagination, SearchResponse
from flight_results.services.batch_analyzer import analyze_batch, annotate_flights
from flight_results.services.facet_extractor import extract_facets
from flight_results.services.price_history_merger import (
    intraday_metrics,
    merge_price_history,
    price_points,
)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def search_response(make_flight) -> SearchResponse:
    """A realistic one-page envelope built with the real pipeline stages."""
    flights = [
        make_flight(id="A", price=420.0, baggage=1, layovers=[("DXB", 95)]),
        make_flight(id="B", price=610.0, airline="LH", departure="2026-07-01T18:20:00"),
    ]
    flights = [
        f.with_annotations(true_cost=estimate_true_cost(f), vibe=rate_vibe(f))
        for f in annotate_flights(flights)
    ]
    history = PriceHistorySchema.validate(
        pd.DataFrame(
            {"date": ["2026-07-01"], "price": [500.0], "min": [450.0], "max": [560.0]}
        )
    )
    return SearchResponse(
        flights=tuple(flights),
        price_history=price_points(history),
        merged_price_history=tuple(merge_price_history(flights, history)),
        intraday_metrics=tuple(intraday_metrics(flights)),
        dictionaries={"carriers": {"BA": "BRITISH AIRWAYS"}},
        filter_options=extract_facets(flights),
        pagination=PageInfo.build(Pagination(page=1, limit=10), len(flights)),
        flight_analysis=analyze_batch(flights, history),
    )


@pytest.fixture
def mock_finder(search_response) -> MagicMock:
    """Create a mock FindFlights facade."""
    finder = MagicMock()
    finder.search = AsyncMock(return_value=search_response)
    return finder


# =============================================================================
# PARAMETER MAPPING
# =============================================================================


class TestSearchParameters:
    """Tests for query parameter translation."""

    def test_intent_and_pagination(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            response = client.get(
                "/search",
                params={
                    "origin": "lhr",
                    "destination": "jfk",
                    "date": "2026-07-01",
                    "returnDate": "2026-07-10",
                    "pax": 2,
                    "cabinClass": "business",
                    "page": 2,
                    "limit": 5,
                    "sort": "departure_desc",
                },
            )

        assert response.status_code == 200
        intent, pagination, criteria, sort = mock_finder.search.await_args.args
        assert intent.origin == "LHR"
        assert intent.destination == "JFK"
        assert intent.return_date == "2026-07-10"
        assert intent.adults == 2
        assert intent.cabin_class == CabinClass.BUSINESS
        assert pagination == Pagination(page=2, limit=5)
        assert criteria.is_empty
        assert sort == SortOption.DEPARTURE_DESC

    def test_filter_parameters(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            response = client.get(
                "/search?origin=LHR&destination=JFK&date=2026-07-01"
                "&maxPrice=800&airlines=BA,LH&stops=0,1&departureWindow=360,720"
                "&hasBaggage=true&maxLayoverDuration=180&connectingAirports=DXB"
            )

        assert response.status_code == 200
        criteria = mock_finder.search.await_args.args[2]
        assert criteria.max_price == 800.0
        assert criteria.airlines == frozenset({"BA", "LH"})
        assert criteria.stops == frozenset({0, 1})
        assert criteria.departure_window == (360, 720)
        assert criteria.has_baggage
        assert criteria.max_layover_duration == 180
        assert criteria.connecting_airports == frozenset({"DXB"})

    def test_party_makeup(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            client.get(
                "/search",
                params={
                    "origin": "LHR",
                    "destination": "JFK",
                    "date": "2026-07-01",
                    "pax": 1,
                    "children": 2,
                    "infants": 1,
                },
            )

        intent = mock_finder.search.await_args.args[0]
        assert (intent.adults, intent.children, intent.infants) == (1, 2, 1)
        assert "|1-2-1|" in intent.signature

    def test_defaults(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            client.get("/search", params={"origin": "LHR", "date": "2026-07-01"})

        intent, pagination, _, sort = mock_finder.search.await_args.args
        assert intent.destination == ""
        assert pagination == Pagination(page=1, limit=10)
        assert sort == SortOption.BEST


# =============================================================================
# ENVELOPE
# =============================================================================


class TestSearchEnvelope:
    """Tests for response serialisation."""

    def test_envelope_keys(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            data = client.get(
                "/search", params={"origin": "LHR", "destination": "JFK", "date": "2026-07-01"}
            ).json()

        assert set(data) == {
            "flights",
            "price_history",
            "merged_price_history",
            "intraday_metrics",
            "dictionaries",
            "filter_options",
            "pagination",
            "flight_analysis",
        }

    def test_flight_serialisation(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            data = client.get(
                "/search", params={"origin": "LHR", "destination": "JFK", "date": "2026-07-01"}
            ).json()

        flight = data["flights"][0]
        assert flight["id"] == "A"
        assert flight["cabin_class"] == "ECONOMY"
        assert flight["duration_minutes"] == 120
        assert flight["layovers"] == [{"airport": "DXB", "duration": 95}]
        assert flight["true_cost"]["total"] == 445.0
        assert flight["vibe"]["aircraft"] == "Standard Aircraft"
        assert "Cheapest" in flight["analysis"]["tags"]
        assert flight["prediction"]["recommendation"] in {"buy", "fair", "monitor"}

    def test_derived_blocks(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            data = client.get(
                "/search", params={"origin": "LHR", "destination": "JFK", "date": "2026-07-01"}
            ).json()

        assert data["pagination"] == {
            "current_page": 1,
            "total_pages": 1,
            "total_count": 2,
            "limit": 10,
            "has_more": False,
        }
        assert data["filter_options"]["airlines"] == ["BA", "LH"]
        assert len(data["filter_options"]["departure_histogram"]) == 24
        assert data["merged_price_history"][0]["source"] == "live"
        assert data["flight_analysis"]["market_source"] == "market"
        assert data["flight_analysis"]["cheapest"] == "A"
        assert data["dictionaries"] == {"carriers": {"BA": "BRITISH AIRWAYS"}}

    def test_empty_response(self, client, mock_finder):
        mock_finder.search.return_value = SearchResponse.empty()
        with patch("flight_results.api.search_api.finder", mock_finder):
            data = client.get("/search", params={"origin": "LHR", "date": "2026-07-01"}).json()

        assert data["flights"] == []
        assert data["filter_options"]["max_price"] == 1000
        assert data["flight_analysis"]["opportunity"] is None


# =============================================================================
# VALIDATION
# =============================================================================


class TestSearchValidation:
    """Tests for rejected requests."""

    @pytest.mark.parametrize(
        "extra",
        [
            {"departureWindow": "360"},
            {"cabinClass": "steerage"},
            {"pax": "0"},
            {"maxPrice": "cheap"},
            {"page": "0"},
        ],
    )
    def test_bad_values_are_400(self, client, mock_finder, extra):
        params = {"origin": "LHR", "destination": "JFK", "date": "2026-07-01", **extra}
        with patch("flight_results.api.search_api.finder", mock_finder):
            response = client.get("/search", params=params)

        assert response.status_code == 400
        mock_finder.search.assert_not_awaited()

    def test_missing_origin_is_422(self, client, mock_finder):
        with patch("flight_results.api.search_api.finder", mock_finder):
            response = client.get("/search", params={"date": "2026-07-01"})
        assert response.status_code == 422
