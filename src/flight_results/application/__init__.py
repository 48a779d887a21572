"""
Application layer for the flight result pipeline.

This layer provides the public API. It acts as a facade, handling
dependency initialization and providing a simple interface for
consumers.
"""

from flight_results.application.find_flights import FindFlights

__all__ = ["FindFlights"]
