"""
Search Orchestrator - composes the result pipeline for one request.

Validates the intent, fetches or reuses the cached raw result, then
derives facets from the full set and filter -> sort -> page from it.
Batch statistics and the merged price history describe every flight
matching the current filters, not just the visible page.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Awaitable, List, Optional, Sequence, Tuple, TypeVar, Union

from flight_results.config import PipelineConfig
from flight_results.schemas.criteria import FilterCriteria, SortOption
from flight_results.schemas.flight import Flight
from flight_results.schemas.price_history import PriceHistoryFrame, empty_price_history
from flight_results.schemas.search import (
    PageInfo,
    Pagination,
    RawSearchResult,
    SearchIntent,
    SearchResponse,
)
from flight_results.services.batch_analyzer import analyze_batch, tag_flights
from flight_results.services.facet_extractor import extract_facets
from flight_results.services.filter_engine import apply_filters
from flight_results.services.price_history_merger import (
    intraday_metrics,
    merge_price_history,
    price_points,
)
from flight_results.services.sort_engine import sort_flights

if TYPE_CHECKING:
    from flight_results.ports.flight_aggregator import FlightAggregator
    from flight_results.ports.flight_annotator import FlightEnricher, FlightPredictor
    from flight_results.ports.price_history_source import PriceHistorySource
    from flight_results.ports.search_cache import SearchCache

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SearchOrchestrator:
    """
    Domain service answering paginated, filtered flight searches.

    Upstream work happens only on a cache miss:
    1. Aggregation and price history fetched concurrently
    2. Enrichment and prediction run concurrently on the raw flights
    3. Whatever succeeded is merged and cached by trip signature

    Every request then recomputes facets, filter, sort, page and
    statistics from the cached raw result.

    Failure handling:
        - Missing destination: empty response, no upstream calls
        - History failure: empty series, flights still returned
        - Enrichment / prediction failure: that annotation is omitted
        - Aggregation failure: empty response, nothing cached

    Attributes:
        _aggregator: Flight search provider.
        _cache: Search-scope cache.
        _history_source: Market price history provider (optional).
        _enricher: Cost/vibe enrichment stage (optional).
        _predictor: Tagging/prediction stage (optional).
        _config: Pipeline configuration.
    """

    def __init__(
        self,
        aggregator: FlightAggregator,
        cache: SearchCache,
        history_source: Optional[PriceHistorySource] = None,
        enricher: Optional[FlightEnricher] = None,
        predictor: Optional[FlightPredictor] = None,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            aggregator: Provider adapter producing canonical flights.
            cache: Injected search cache instance.
            history_source: Price history adapter. If None, history is empty.
            enricher: Enrichment adapter. If None, flights are not enriched.
            predictor: Prediction adapter. If None, no predictions are merged.
            config: Pipeline configuration. If None, uses defaults.
        """
        self._aggregator = aggregator
        self._cache = cache
        self._history_source = history_source
        self._enricher = enricher
        self._predictor = predictor
        self._config = config or PipelineConfig()

    async def search(
        self,
        intent: SearchIntent,
        pagination: Optional[Pagination] = None,
        criteria: Optional[FilterCriteria] = None,
        sort: Union[SortOption, str, None] = None,
    ) -> SearchResponse:
        """
        Answer one page of a search.

        Args:
            intent: Trip parameters.
            pagination: Page request. If None, first page with the
                configured default page size.
            criteria: Filters. If None, nothing is filtered out.
            sort: Sort strategy, defaults to best.

        Returns:
            SearchResponse envelope; never raises for upstream failures.
        """
        pagination = pagination or Pagination(limit=self._config.default_page_size)

        if not intent.destination:
            logger.info("Search without destination from %s, skipping", intent.origin)
            return SearchResponse.empty(pagination)

        start_time = time.perf_counter()
        raw = await self._get_raw_result(intent)

        facets = extract_facets(raw.flights)
        matching = sort_flights(apply_filters(raw.flights, criteria), sort)
        page = matching[pagination.offset:pagination.offset + pagination.limit]

        response = SearchResponse(
            flights=tuple(page),
            price_history=price_points(raw.price_history),
            merged_price_history=tuple(merge_price_history(matching, raw.price_history)),
            intraday_metrics=tuple(intraday_metrics(matching)),
            dictionaries=raw.dictionaries,
            filter_options=facets,
            pagination=PageInfo.build(pagination, len(matching)),
            flight_analysis=analyze_batch(
                matching,
                raw.price_history,
                scarcity_threshold=self._config.scarcity_threshold,
            ),
        )

        logger.info(
            "Search %s: %d raw, %d matching, page %d/%d in %.0fms",
            intent.signature,
            len(raw.flights),
            len(matching),
            pagination.page,
            response.pagination.total_pages,
            (time.perf_counter() - start_time) * 1000,
        )
        return response

    async def _get_raw_result(self, intent: SearchIntent) -> RawSearchResult:
        """Return the cached raw result or fetch and cache a new one."""
        signature = intent.signature
        cached = self._cache.get(signature)
        if cached is not None:
            logger.debug("Cache hit: %s", signature)
            return cached

        logger.debug("Cache miss: %s", signature)
        raw, succeeded = await self._fetch(intent)
        if succeeded:
            self._cache.set(signature, raw)
        return raw

    async def _fetch(self, intent: SearchIntent) -> Tuple[RawSearchResult, bool]:
        """
        Run the upstream stages.

        Returns:
            Raw result and whether aggregation succeeded (cacheable).
        """
        start_time = time.perf_counter()

        # Aggregation and history in parallel, neither blocks the other
        aggregation, history = await asyncio.gather(
            self._bounded(self._aggregator.aggregate(intent)),
            self._bounded(self._fetch_history(intent)),
            return_exceptions=True,
        )

        if isinstance(history, BaseException):
            logger.warning(
                "Price history unavailable for %s-%s: %s",
                intent.origin,
                intent.destination,
                history,
            )
            history = empty_price_history()

        if isinstance(aggregation, BaseException):
            logger.error(
                "Aggregation via %s failed for %s: %s",
                self._aggregator.name,
                intent.signature,
                aggregation,
            )
            return RawSearchResult(flights=(), price_history=history), False

        flights = await self._annotate(aggregation.flights)

        logger.info(
            "Fetched %d flights from %s in %.0fms",
            len(flights),
            self._aggregator.name,
            (time.perf_counter() - start_time) * 1000,
        )
        return (
            RawSearchResult(
                flights=tuple(flights),
                price_history=history,
                dictionaries=aggregation.dictionaries,
            ),
            True,
        )

    async def _fetch_history(self, intent: SearchIntent) -> PriceHistoryFrame:
        if self._history_source is None:
            return empty_price_history()
        return await self._history_source.get_price_history(
            intent.origin, intent.destination
        )

    async def _annotate(self, flights: Sequence[Flight]) -> List[Flight]:
        """
        Enrich and predict concurrently, merging whichever succeeded.

        Enrichment output replaces the raw flights; predictions are
        merged by id since the predictor may reorder or drop flights.
        Tags and persona scores are recomputed over the merged flights
        because the predictor ran before any vibe score existed.
        """
        if not flights:
            return []

        enriched, predicted = await asyncio.gather(
            self._enrich(flights),
            self._predict(flights),
            return_exceptions=True,
        )

        result = list(flights)
        if isinstance(enriched, BaseException):
            logger.warning("Enricher failed, returning unenriched flights: %s", enriched)
        elif enriched is not None:
            result = list(enriched)

        if isinstance(predicted, BaseException):
            logger.warning("Predictor failed, omitting predictions: %s", predicted)
        elif predicted is not None:
            by_id = {flight.id: flight.prediction for flight in predicted}
            kept = [
                flight.with_annotations(prediction=by_id[flight.id])
                for flight in result
                if flight.id in by_id
            ]
            tagged = {flight.id: flight for flight in tag_flights(kept)}
            result = [tagged.get(flight.id, flight) for flight in result]

        return result

    async def _enrich(self, flights: Sequence[Flight]) -> Optional[List[Flight]]:
        if self._enricher is None:
            return None
        return await self._bounded(self._enricher.enrich(list(flights)))

    async def _predict(self, flights: Sequence[Flight]) -> Optional[List[Flight]]:
        if self._predictor is None:
            return None
        return await self._bounded(self._predictor.predict(list(flights)))

    def _bounded(self, awaitable: Awaitable[T]) -> Awaitable[T]:
        return asyncio.wait_for(awaitable, timeout=self._config.upstream_timeout_seconds)
