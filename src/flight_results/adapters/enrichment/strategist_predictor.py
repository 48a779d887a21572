"""Strategist Predictor - FlightPredictor over the batch analyzer."""

from __future__ import annotations

from typing import List, Sequence

from flight_results.schemas.flight import Flight
from flight_results.services.batch_analyzer import annotate_flights


class StrategistPredictor:
    """Tags, persona scores and prediction for every flight of a batch."""

    async def predict(self, flights: Sequence[Flight]) -> List[Flight]:
        return annotate_flights(flights)
