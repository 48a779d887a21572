"""Dispatch a provider offer to its mapper."""

from __future__ import annotations

import logging
from typing import Iterable, List

from flight_results.adapters.providers.amadeus_mapper import map_amadeus_offer
from flight_results.adapters.providers.duffel_mapper import map_duffel_offer
from flight_results.adapters.providers.offers import (
    AmadeusOffer,
    DuffelOffer,
    ProviderOffer,
)
from flight_results.schemas.flight import Flight

logger = logging.getLogger(__name__)


def normalize_offer(offer: ProviderOffer) -> Flight:
    """
    Map any provider offer to a canonical Flight.

    Raises:
        KeyError, IndexError, TypeError, ValueError: If the payload is malformed.
    """
    if isinstance(offer, AmadeusOffer):
        return map_amadeus_offer(offer)
    if isinstance(offer, DuffelOffer):
        return map_duffel_offer(offer)
    raise TypeError(f"Unsupported offer type: {type(offer).__name__}")


def normalize_offers(offers: Iterable[ProviderOffer]) -> List[Flight]:
    """Map a result set, skipping malformed offers."""
    flights = []
    for offer in offers:
        try:
            flights.append(normalize_offer(offer))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.debug(
                "Skipping malformed %s %s: %s",
                type(offer).__name__,
                offer.payload.get("id"),
                e,
            )
    return flights
