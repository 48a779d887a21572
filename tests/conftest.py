"""Shared fixtures for flight result pipeline tests."""

from typing import Callable, Optional, Sequence

import pytest

from flight_results.schemas.flight import (
    Baggage,
    CabinClass,
    Flight,
    FlightEndpoint,
    Layover,
    Vibe,
)
from flight_results.services.duration_codec import clear_duration_cache


@pytest.fixture
def anyio_backend():
    """Use only asyncio backend (trio not installed)."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_duration_cache():
    """Each test starts with an empty duration memo."""
    clear_duration_cache()
    yield
    clear_duration_cache()


@pytest.fixture
def make_flight() -> Callable[..., Flight]:
    """
    Factory for canonical flights.

    Layovers are given as (airport, minutes) pairs; stops follow from
    their count. Segments are left empty.
    """

    def _make(
        id: str = "F1",
        price: float = 500.0,
        duration: str = "PT2H00M",
        departure: str = "2026-07-01T10:00:00",
        arrival: str = "2026-07-01T12:00:00",
        airline: str = "BA",
        layovers: Sequence[tuple] = (),
        baggage: Optional[int] = None,
        vibe: Optional[float] = None,
        cabin_class: CabinClass = CabinClass.ECONOMY,
    ) -> Flight:
        return Flight(
            id=id,
            airline=airline,
            flight_number=f"{airline}100",
            departure=FlightEndpoint(code="LHR", city="London", time=departure),
            arrival=FlightEndpoint(code="JFK", city="New York", time=arrival),
            duration=duration,
            stops=len(layovers),
            price=price,
            cabin_class=cabin_class,
            layovers=tuple(Layover(airport=a, duration=m) for a, m in layovers),
            baggage=Baggage(quantity=baggage) if baggage is not None else None,
            vibe=(
                Vibe(score=vibe, aircraft="Test Aircraft", description="Test")
                if vibe is not None
                else None
            ),
        )

    return _make
