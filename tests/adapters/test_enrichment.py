"""
Tests for enrichment adapters.

Tests cover:
- Aircraft catalogue lookup (exact, prefix, default)
- True cost fee heuristics
- Vibe rating from the first segment
- AircraftEnricher / StrategistPredictor port conformance
"""

import pytest

from flight_results.adapters.enrichment import (
    AircraftEnricher,
    StrategistPredictor,
)
from flight_results.adapters.enrichment.aircraft_catalog import (
    DEFAULT_AIRCRAFT,
    lookup_aircraft,
)
from flight_results.adapters.enrichment.aircraft_enricher import (
    estimate_true_cost,
    rate_vibe,
)
from flight_results.ports.flight_annotator import FlightEnricher, FlightPredictor
from flight_results.schemas.flight import (
    Baggage,
    CabinClass,
    Flight,
    FlightEndpoint,
    Segment,
    SegmentEndpoint,
)


def _flight_on(aircraft, price=400.0, airline="BA") -> Flight:
    segment = Segment(
        departure=SegmentEndpoint(iata_code="LHR", at="2026-07-01T10:00:00"),
        arrival=SegmentEndpoint(iata_code="JFK", at="2026-07-01T13:00:00"),
        carrier_code=airline,
        number="117",
        aircraft=aircraft,
    )
    return Flight(
        id="E1",
        airline=airline,
        flight_number=f"{airline}117",
        departure=FlightEndpoint("LHR", "London", "2026-07-01T10:00:00"),
        arrival=FlightEndpoint("JFK", "New York", "2026-07-01T13:00:00"),
        duration="8h00m",
        stops=0,
        price=price,
        segments=(segment,),
    )


# =============================================================================
# CATALOGUE
# =============================================================================


class TestLookupAircraft:
    """Tests for catalogue resolution."""

    def test_exact_code(self):
        assert lookup_aircraft("77W").name == "Boeing 777-300ER"

    def test_case_insensitive(self):
        assert lookup_aircraft("32n").name == "Airbus A320neo"

    def test_prefix_fallback(self):
        """Unknown variants resolve to their 3-character family."""
        assert lookup_aircraft("7879").name == "Boeing 787 Dreamliner"

    @pytest.mark.parametrize("code", [None, "", "ZZZ"])
    def test_default(self, code):
        assert lookup_aircraft(code) is DEFAULT_AIRCRAFT


# =============================================================================
# TRUE COST
# =============================================================================


class TestEstimateTrueCost:
    """Tests for fee heuristics."""

    def test_legacy_carrier_without_bag(self, make_flight):
        cost = estimate_true_cost(make_flight(price=400.0, airline="BA"))
        assert cost.base_fare == 400.0
        assert cost.baggage_fee == 35.0
        assert cost.seat_selection_fee == 25.0
        assert cost.total == 460.0

    def test_low_cost_carrier_without_bag(self, make_flight):
        cost = estimate_true_cost(make_flight(price=40.0, airline="FR"))
        assert cost.baggage_fee == 55.0
        assert cost.total == 120.0

    def test_included_bag_has_no_fee(self, make_flight):
        cost = estimate_true_cost(make_flight(price=400.0, baggage=1))
        assert cost.baggage_fee == 0.0

    def test_zero_bags_is_charged(self, make_flight):
        cost = estimate_true_cost(make_flight(price=400.0, baggage=0))
        assert cost.baggage_fee == 35.0

    def test_no_seat_fee_outside_economy(self, make_flight):
        cost = estimate_true_cost(
            make_flight(price=2400.0, cabin_class=CabinClass.BUSINESS, baggage=2)
        )
        assert cost.seat_selection_fee == 0.0
        assert cost.total == 2400.0


# =============================================================================
# VIBE
# =============================================================================


class TestRateVibe:
    """Tests for comfort rating."""

    def test_known_aircraft(self):
        vibe = rate_vibe(_flight_on("380"))
        assert vibe.score == 9.8
        assert vibe.aircraft == "Airbus A380"
        assert vibe.description == "Super Jumbo • Silent • Bar/Lounge Potential"

    def test_unknown_aircraft_gets_default(self):
        vibe = rate_vibe(_flight_on(None))
        assert vibe.score == 6.0
        assert vibe.description == "Standard Configuration"

    def test_flight_without_segments(self, make_flight):
        assert rate_vibe(make_flight()).aircraft == "Standard Aircraft"


# =============================================================================
# ADAPTERS
# =============================================================================


class TestAnnotationAdapters:
    """Tests for the enricher and predictor adapters."""

    def test_protocol_conformance(self):
        assert isinstance(AircraftEnricher(), FlightEnricher)
        assert isinstance(StrategistPredictor(), FlightPredictor)

    @pytest.mark.anyio
    async def test_enrich_preserves_order_and_ids(self, make_flight):
        flights = [make_flight(id="A", price=300.0), make_flight(id="B", price=200.0)]
        enriched = await AircraftEnricher().enrich(flights)

        assert [f.id for f in enriched] == ["A", "B"]
        assert enriched[0].true_cost.total == 360.0
        assert enriched[1].vibe is not None
        assert flights[0].true_cost is None

    @pytest.mark.anyio
    async def test_enriched_vibe_feeds_best_vibe(self):
        flights = [
            _flight_on("CR9").with_annotations(id="regional"),
            _flight_on("789").with_annotations(id="dreamliner", baggage=Baggage(quantity=1)),
        ]
        enriched = await AircraftEnricher().enrich(flights)
        annotated = await StrategistPredictor().predict(enriched)

        by_id = {f.id: f for f in annotated}
        assert "Best Vibe" in by_id["dreamliner"].analysis.tags
        assert by_id["regional"].analysis.persona_scores.vibe_scout == 55.0
