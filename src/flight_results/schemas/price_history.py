"""
Price history schemas using Pandera.

The historical series arrives as a DataFrame from the history source and
is validated once at that boundary. Everything downstream of the merger
works with plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pandas as pd
import pandera as pa
from pandera.typing import DataFrame, Series


class PriceHistorySchema(pa.DataFrameModel):
    """
    Per-day market price series for a route.

    One row per calendar date. Dates are kept as 'YYYY-MM-DD' strings so
    comparisons against local flight timestamps never drift across
    timezones.
    """

    date: Series[str] = pa.Field(
        nullable=False,
        str_matches=r"^\d{4}-\d{2}-\d{2}$",
        description="Calendar date (YYYY-MM-DD)",
    )
    price: Series[float] = pa.Field(
        ge=0,
        description="Representative price for the date",
    )
    min: Series[float] = pa.Field(
        ge=0,
        description="Lowest observed price for the date",
    )
    max: Series[float] = pa.Field(
        ge=0,
        description="Highest observed price for the date",
    )

    class Config:
        strict = False
        coerce = True
        name = "PriceHistorySchema"
        description = "Approximate per-day market price history"


PriceHistoryFrame = DataFrame[PriceHistorySchema]

PRICE_HISTORY_COLUMNS = ["date", "price", "min", "max"]


def empty_price_history() -> PriceHistoryFrame:
    """Return a validated empty price history frame."""
    frame = pd.DataFrame(
        {
            "date": pd.Series(dtype="str"),
            "price": pd.Series(dtype="float64"),
            "min": pd.Series(dtype="float64"),
            "max": pd.Series(dtype="float64"),
        }
    )
    return PriceHistorySchema.validate(frame)


class PriceSource(str, Enum):
    """Origin of a merged price point."""

    HISTORY = "history"
    LIVE = "live"


@dataclass(frozen=True)
class PricePoint:
    """One day of the historical series."""

    date: str
    price: float
    min: float
    max: float


@dataclass(frozen=True)
class MergedPricePoint:
    """Historical point reconciled with live results."""

    date: str
    price: float
    min: float
    max: float
    source: PriceSource


@dataclass(frozen=True)
class IntradayMetric:
    """Price statistics for departures within one wall-clock hour."""

    hour: int
    label: str
    min_price: float
    avg_price: float
    count: int
