from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from flight_results.application import FindFlights
from flight_results.config import Settings
from flight_results.schemas.analysis import MarketSource, OpportunityType
from flight_results.schemas.criteria import FilterCriteria, SortOption
from flight_results.schemas.flight import CabinClass
from flight_results.schemas.price_history import PriceSource
from flight_results.schemas.search import Pagination, SearchIntent

finder = FindFlights()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await finder.close()


app = FastAPI(title="Flight Results API", lifespan=lifespan)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:3001", "http://127.0.0.1:3000", "http://127.0.0.1:3001"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Pydantic Schemas (The JSON Contract) ---
# Read straight from the frozen dataclasses returned by the pipeline.


class FlightEndpointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    city: str
    time: str


class SegmentEndpointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    iata_code: str
    at: str
    terminal: Optional[str] = None


class SegmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    departure: SegmentEndpointSchema
    arrival: SegmentEndpointSchema
    carrier_code: str
    number: str
    duration: str
    aircraft: Optional[str] = None


class LayoverSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    airport: str
    duration: int


class BaggageSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    quantity: Optional[int] = None
    weight: Optional[float] = None
    unit: Optional[str] = None


class ItinerarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    departure: FlightEndpointSchema
    arrival: FlightEndpointSchema
    duration: str
    stops: int
    segments: List[SegmentSchema]
    layovers: List[LayoverSchema]


class TrueCostSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    base_fare: float
    baggage_fee: float
    seat_selection_fee: float
    total: float


class VibeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    score: float
    aircraft: str
    description: str
    tags: List[str]


class PersonaScoresSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    road_warrior: float
    vibe_scout: float
    budget_master: float


class FlightAnnotationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tags: List[str]
    persona_scores: PersonaScoresSchema


class PredictionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    trajectory: str
    recommendation: str
    confidence: float
    details: str


class FlightSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    airline: str
    flight_number: str
    departure: FlightEndpointSchema
    arrival: FlightEndpointSchema
    duration: str
    duration_minutes: int  # Captures @property
    stops: int
    price: float
    cabin_class: CabinClass
    segments: List[SegmentSchema]
    layovers: List[LayoverSchema]
    baggage: Optional[BaggageSchema] = None
    return_flight: Optional[ItinerarySchema] = None
    true_cost: Optional[TrueCostSchema] = None
    vibe: Optional[VibeSchema] = None
    analysis: Optional[FlightAnnotationSchema] = None
    prediction: Optional[PredictionSchema] = None


class PricePointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    price: float
    min: float
    max: float


class MergedPricePointSchema(PricePointSchema):
    source: PriceSource


class IntradayMetricSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hour: int
    label: str
    min_price: float
    avg_price: float
    count: int


class FilterOptionsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    min_price: float
    max_price: float
    min_duration: int
    max_duration: int
    airlines: List[str]
    min_layover: int
    max_layover: int
    connecting_airports: List[str]
    departure_histogram: List[float]
    arrival_histogram: List[float]


class PageInfoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_more: bool


class OpportunitySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: OpportunityType
    message: str


class FlightAnalysisSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mean_price: float
    standard_deviation: float
    cheapest: str
    fastest: str
    best_vibe: str
    opportunity: Optional[OpportunitySchema] = None
    market_source: MarketSource


class SearchResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    flights: List[FlightSchema]
    price_history: List[PricePointSchema]
    merged_price_history: List[MergedPricePointSchema]
    intraday_metrics: List[IntradayMetricSchema]
    dictionaries: Dict[str, Any]
    filter_options: FilterOptionsSchema
    pagination: PageInfoSchema
    flight_analysis: FlightAnalysisSchema


# --- API Endpoints ---


@app.get("/search", response_model=SearchResponseSchema)
async def search_flights(
    request: Request,
    origin: str,
    date: str,
    destination: Optional[str] = None,
    return_date: Optional[str] = Query(None, alias="returnDate"),
    pax: int = 1,
    children: int = 0,
    infants: int = 0,
    cabin_class: Optional[str] = Query(None, alias="cabinClass"),
    currency: str = "USD",
    page: int = 1,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
):
    """
    Search flights and return one page of the filtered, sorted result set.

    pax is the number of adults; children and infants are counted
    separately, and all three are part of the trip cache key.

    Filter parameters (maxPrice, airlines, stops, maxDuration,
    departureWindow, arrivalWindow, hasBaggage, maxLayoverDuration,
    connectingAirports) are read from the raw query string.
    """
    try:
        intent = SearchIntent.create(
            origin=origin,
            destination=destination,
            date=date,
            return_date=return_date,
            adults=pax,
            children=children,
            infants=infants,
            cabin_class=cabin_class,
            currency=currency,
        )
        pagination = Pagination(page=page, limit=limit or Settings.pipeline.default_page_size)
        criteria = FilterCriteria.from_query_params(request.query_params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    response = await finder.search(intent, pagination, criteria, SortOption.parse(sort))
    return SearchResponseSchema.model_validate(response)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
