"""
Search request and response schemas.

SearchIntent carries trip parameters (the cache signature inputs);
Pagination, FilterCriteria and SortOption are presentation parameters
that never affect the signature.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .analysis import FlightAnalysis
from .facets import FilterOptions
from .flight import CabinClass, Flight
from .price_history import (
    IntradayMetric,
    MergedPricePoint,
    PriceHistoryFrame,
    PricePoint,
)

DEFAULT_PAGE_SIZE = 10

Dictionaries = Dict[str, Any]


@dataclass(frozen=True)
class SearchIntent:
    """
    Trip parameters of a search.

    Attributes:
        origin: Origin IATA code.
        destination: Destination IATA code ('' when not chosen yet).
        date: Outbound date (YYYY-MM-DD).
        return_date: Return date for round trips.
        adults: Party size.
        children: Number of children.
        infants: Number of infants.
        cabin_class: Requested cabin.
        currency: ISO currency code of all prices.
    """

    origin: str
    destination: str
    date: str
    return_date: Optional[str] = None
    adults: int = 1
    children: int = 0
    infants: int = 0
    cabin_class: CabinClass = CabinClass.ECONOMY
    currency: str = "USD"

    def __post_init__(self) -> None:
        """Validate party composition."""
        if self.adults < 1:
            raise ValueError(f"adults must be >= 1, got {self.adults}")
        if self.children < 0 or self.infants < 0:
            raise ValueError("children and infants must be >= 0")

    @classmethod
    def create(
        cls,
        origin: str,
        destination: Optional[str],
        date: str,
        return_date: Optional[str] = None,
        adults: int = 1,
        children: int = 0,
        infants: int = 0,
        cabin_class: Optional[str] = None,
        currency: str = "USD",
    ) -> "SearchIntent":
        """
        Factory method normalising codes and cabin class.

        Returns:
            Validated SearchIntent instance.
        """
        return cls(
            origin=(origin or "").strip().upper(),
            destination=(destination or "").strip().upper(),
            date=date,
            return_date=return_date or None,
            adults=int(adults),
            children=int(children),
            infants=int(infants),
            cabin_class=CabinClass.parse(cabin_class),
            currency=(currency or "USD").strip().upper(),
        )

    @property
    def is_round_trip(self) -> bool:
        return self.return_date is not None

    @property
    def signature(self) -> str:
        """
        Cache key for this trip.

        Ordered (origin, destination, date, return date, party, cabin,
        currency). The party is adults-children-infants so two searches
        with the same head count but a different makeup never share fares.
        Pagination, filters and sort are not part of it.
        """
        return "|".join(
            [
                self.origin,
                self.destination,
                self.date,
                self.return_date or "",
                f"{self.adults}-{self.children}-{self.infants}",
                self.cabin_class.value,
                self.currency,
            ]
        )


@dataclass(frozen=True)
class Pagination:
    """1-based page request."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageInfo:
    """Pagination block of the response envelope."""

    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_more: bool

    @classmethod
    def build(cls, pagination: Pagination, total_count: int) -> "PageInfo":
        """Derive page counts for a result set of total_count flights."""
        total_pages = math.ceil(total_count / pagination.limit)
        return cls(
            current_page=pagination.page,
            total_pages=total_pages,
            total_count=total_count,
            limit=pagination.limit,
            has_more=pagination.page < total_pages,
        )


@dataclass(frozen=True)
class AggregationResult:
    """Output of a provider aggregation: flights plus code dictionaries."""

    flights: List[Flight] = field(default_factory=list)
    dictionaries: Dictionaries = field(default_factory=dict)


@dataclass(frozen=True)
class RawSearchResult:
    """
    Cached value for a search signature.

    Unfiltered, unsorted, unpaginated aggregation + enrichment output.
    """

    flights: Tuple[Flight, ...]
    price_history: PriceHistoryFrame
    dictionaries: Dictionaries = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResponse:
    """
    Response envelope for one page of results.

    Attributes:
        flights: Flights on the requested page.
        price_history: Historical series for the route.
        merged_price_history: History reconciled with live prices.
        intraday_metrics: Per-hour price stats of the filtered set.
        dictionaries: Provider code dictionaries, passed through.
        filter_options: Facets of the full unfiltered set.
        pagination: Page counts of the filtered set.
        flight_analysis: Statistics of the filtered set.
    """

    flights: Tuple[Flight, ...]
    price_history: Tuple[PricePoint, ...]
    merged_price_history: Tuple[MergedPricePoint, ...]
    intraday_metrics: Tuple[IntradayMetric, ...]
    dictionaries: Dictionaries
    filter_options: FilterOptions
    pagination: PageInfo
    flight_analysis: FlightAnalysis

    @classmethod
    def empty(cls, pagination: Optional[Pagination] = None) -> "SearchResponse":
        """Well-formed response with no results."""
        return cls(
            flights=(),
            price_history=(),
            merged_price_history=(),
            intraday_metrics=(),
            dictionaries={},
            filter_options=FilterOptions.default(),
            pagination=PageInfo.build(pagination or Pagination(), 0),
            flight_analysis=FlightAnalysis.empty(),
        )
