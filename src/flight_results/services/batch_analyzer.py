"""
Batch Analyzer - statistical summary of a flight collection.

Computes price mean/stddev, the cheapest / fastest / best-vibe flights
and a simple opportunity heuristic in one pass. When a historical price
series is available its mean replaces the local one, so "is this cheap"
is judged against the market rather than just the current results. The
standard deviation always measures local dispersion, centred on
whichever mean was selected.

Also hosts the strategist stage that tags flights and scores them per
traveller persona relative to their batch.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from flight_results.schemas.analysis import (
    FlightAnalysis,
    FlightInsight,
    MarketSource,
    Opportunity,
    OpportunityType,
    RecommendationType,
)
from flight_results.schemas.flight import (
    Flight,
    FlightAnnotation,
    PersonaScores,
    Prediction,
)
from flight_results.schemas.price_history import PriceHistoryFrame

logger = logging.getLogger(__name__)

DEFAULT_VIBE_SCORE = 5.0
SCARCITY_THRESHOLD = 1000.0

TAG_CHEAPEST = "Cheapest"
TAG_FASTEST = "Fastest"
TAG_BEST_VIBE = "Best Vibe"
TAG_SMART_DEAL = "Smart Deal"

_BAND_PROSE = {
    RecommendationType.BUY: (
        "STRONG BUY: The price is significantly lower than similar flights "
        "found today."
    ),
    RecommendationType.MONITOR: (
        "MONITOR: Prices are trending high. Unless you need this specific "
        "schedule, you might find better value by adjusting dates."
    ),
    RecommendationType.FAIR: (
        "FAIR VALUE: This price aligns with current market rates for this route."
    ),
}

PREDICTION_TRAJECTORY = "stable"
PREDICTION_CONFIDENCE = 85.0


def analyze_batch(
    flights: Sequence[Flight],
    price_history: Optional[PriceHistoryFrame] = None,
    scarcity_threshold: float = SCARCITY_THRESHOLD,
) -> FlightAnalysis:
    """
    Summarise a flight collection in a single pass.

    Extrema ties keep the first flight in collection order. A missing
    vibe score counts as DEFAULT_VIBE_SCORE.

    Args:
        flights: Filtered (and usually sorted) flights.
        price_history: Optional market series; its mean anchors the
            analysis when non-empty.
        scarcity_threshold: Minimum price above which a scarcity
            opportunity is reported (currency-unaware).

    Returns:
        FlightAnalysis, or FlightAnalysis.empty() for no flights.
    """
    if not flights:
        return FlightAnalysis.empty()

    min_price = math.inf
    cheapest = ""
    min_duration = math.inf
    fastest = ""
    max_vibe = -math.inf
    best_vibe = ""
    count = 0
    local_mean = 0.0
    m2 = 0.0

    for flight in flights:
        price = flight.price
        if price < min_price:
            min_price, cheapest = price, flight.id

        duration = flight.duration_minutes
        if duration < min_duration:
            min_duration, fastest = duration, flight.id

        vibe = flight.vibe_score
        vibe = DEFAULT_VIBE_SCORE if vibe is None else vibe
        if vibe > max_vibe:
            max_vibe, best_vibe = vibe, flight.id

        # Welford update
        count += 1
        delta = price - local_mean
        local_mean += delta / count
        m2 += delta * (price - local_mean)

    mean = local_mean
    market_source = MarketSource.LOCAL

    if price_history is not None and not price_history.empty:
        mean = float(price_history["price"].mean())
        market_source = MarketSource.MARKET

    # Spread around the anchoring mean, which may be the market one
    variance = m2 / count + (local_mean - mean) ** 2
    std_dev = math.sqrt(max(variance, 0.0))

    opportunity = None
    gap = mean - min_price
    if gap > std_dev:
        opportunity = Opportunity(
            type=OpportunityType.SAVINGS,
            message=f"Save ${gap:.2f} by choosing our Smart Deal today.",
        )
    elif min_price > scarcity_threshold:
        opportunity = Opportunity(
            type=OpportunityType.SCARCITY,
            message="Prices are high likely due to demand. Book soon.",
        )

    return FlightAnalysis(
        mean_price=mean,
        standard_deviation=std_dev,
        cheapest=cheapest,
        fastest=fastest,
        best_vibe=best_vibe,
        opportunity=opportunity,
        market_source=market_source,
    )


def recommendation_type(flight: Flight, analysis: FlightAnalysis) -> RecommendationType:
    """
    Classify a flight's price against its batch.

    price < mean - stddev/2 is a buy, price > mean + stddev is monitor,
    anything in between is fair.
    """
    mean = analysis.mean_price
    std_dev = analysis.standard_deviation
    if flight.price < mean - std_dev / 2:
        return RecommendationType.BUY
    if flight.price > mean + std_dev:
        return RecommendationType.MONITOR
    return RecommendationType.FAIR


def generate_flight_analysis(flight: Flight, analysis: FlightAnalysis) -> FlightInsight:
    """
    Build the natural-language insight for one flight.

    Args:
        flight: Flight to describe.
        analysis: Statistics of the batch the flight belongs to.

    Returns:
        FlightInsight with price, time and recommendation prose.
    """
    mean = analysis.mean_price
    diff = abs(flight.price - mean)

    if flight.price < mean:
        price_insight = (
            f"This flight is ${diff:.2f} cheaper than the average market "
            f"price of ${mean:.2f}."
        )
    else:
        price_insight = (
            f"This flight is ${diff:.2f} above the average, reflecting its "
            f"premium convenience or carrier."
        )

    if flight.stops == 0:
        time_insight = "It is a non-stop flight, offering the most efficient travel time."
    else:
        time_insight = f"This route includes {flight.stops} stop(s)."

    band = recommendation_type(flight, analysis)
    return FlightInsight(
        price_insight=price_insight,
        time_insight=time_insight,
        prediction=_BAND_PROSE[band],
        recommendation=band,
    )


def _persona_scores(flight: Flight, min_price: float, min_duration: int) -> PersonaScores:
    price = flight.price
    duration = flight.duration_minutes
    vibe = flight.vibe_score
    vibe = DEFAULT_VIBE_SCORE if vibe is None else vibe

    budget = 100.0 if price <= 0 else min_price / price * 100
    road_warrior = 0.0 if duration <= 0 else min_duration / duration * 100

    return PersonaScores(
        road_warrior=round(min(road_warrior, 100.0), 1),
        vibe_scout=round(min(max(vibe * 10, 0.0), 100.0), 1),
        budget_master=round(min(budget, 100.0), 1),
    )


def _flight_annotations(
    flights: Sequence[Flight], analysis: FlightAnalysis
) -> List[FlightAnnotation]:
    min_price = min(f.price for f in flights)
    durations = [d for d in (f.duration_minutes for f in flights) if d > 0]
    min_duration = min(durations) if durations else 0
    smart_deal = (
        analysis.opportunity is not None
        and analysis.opportunity.type == OpportunityType.SAVINGS
    )

    annotations = []
    for flight in flights:
        tags = []
        if flight.id == analysis.cheapest:
            tags.append(TAG_CHEAPEST)
        if flight.id == analysis.fastest:
            tags.append(TAG_FASTEST)
        if flight.id == analysis.best_vibe:
            tags.append(TAG_BEST_VIBE)
        if smart_deal and flight.id == analysis.cheapest:
            tags.append(TAG_SMART_DEAL)
        annotations.append(
            FlightAnnotation(
                tags=tuple(tags),
                persona_scores=_persona_scores(flight, min_price, min_duration),
            )
        )
    return annotations


def tag_flights(
    flights: Sequence[Flight],
    price_history: Optional[PriceHistoryFrame] = None,
) -> List[Flight]:
    """
    Attach tags and persona scores only, leaving predictions untouched.

    Vibe-based tags and scores read each flight's vibe score, so run
    this on enriched flights.
    """
    if not flights:
        return []
    analysis = analyze_batch(flights, price_history)
    return [
        flight.with_annotations(analysis=annotation)
        for flight, annotation in zip(flights, _flight_annotations(flights, analysis))
    ]


def annotate_flights(
    flights: Sequence[Flight],
    price_history: Optional[PriceHistoryFrame] = None,
) -> List[Flight]:
    """
    Tag and score every flight relative to its batch.

    Adds a FlightAnnotation (Cheapest / Fastest / Best Vibe / Smart Deal
    tags and persona scores) and a legacy Prediction carrying the
    recommendation band.

    Args:
        flights: Raw or enriched flights.
        price_history: Optional market series for the mean.

    Returns:
        New annotated flights, same order as input.
    """
    if not flights:
        return []

    analysis = analyze_batch(flights, price_history)
    annotated = []
    for flight, annotation in zip(flights, _flight_annotations(flights, analysis)):
        band = recommendation_type(flight, analysis)
        annotated.append(
            flight.with_annotations(
                analysis=annotation,
                prediction=Prediction(
                    trajectory=PREDICTION_TRAJECTORY,
                    recommendation=band.value,
                    confidence=PREDICTION_CONFIDENCE,
                    details=_BAND_PROSE[band],
                ),
            )
        )

    logger.debug(
        "Annotated %d flights (cheapest=%s, fastest=%s)",
        len(annotated),
        analysis.cheapest,
        analysis.fastest,
    )
    return annotated
