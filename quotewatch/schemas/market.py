"""
CONTRACT 1: Data Ingestion Layer

Input: DataRequest
Output: PriceSeries

Raw provider records are validated and normalized into an ordered,
newest-first series of closing prices.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

import numpy as np
from pydantic import BaseModel, Field, model_validator

from quotewatch.services.base import EmptySeriesError

logger = logging.getLogger(__name__)

# Alpha Vantage intraday timestamp layout
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class PriceIndexError(IndexError):
    """Requested index lies outside the series."""
    pass


# =============================================================================
# INPUT: DataRequest
# =============================================================================


class DataRequest(BaseModel):
    """
    Request for a fresh price series.
    Sent by: Polling Loop
    Received by: Data Ingestion Service
    """

    symbol: str = Field(..., min_length=1, description="Ticker to fetch (e.g., 'IBM')")


# =============================================================================
# OUTPUT: PriceSeries
# =============================================================================


class PricePoint(BaseModel):
    """Single closing price."""

    timestamp: int = Field(..., description="Milliseconds since epoch")
    close: float = Field(..., ge=0, allow_inf_nan=False)

    class Config:
        frozen = True


class PriceSeries(BaseModel):
    """
    Ordered closing prices, newest first (index 0 = most recent).

    Built fresh for every polling cycle and never updated in place.
    """

    points: tuple[PricePoint, ...] = ()

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_unique_timestamps(self) -> "PriceSeries":
        seen = set()
        for point in self.points:
            if point.timestamp in seen:
                raise ValueError(f"duplicate timestamp {point.timestamp}")
            seen.add(point.timestamp)
        return self

    def __len__(self) -> int:
        return len(self.points)

    def length(self) -> int:
        return len(self.points)

    def price_at(self, index: int) -> float:
        """Close of the index-th newest point."""
        if index < 0 or index >= len(self.points):
            raise PriceIndexError(
                f"index {index} out of range for series of length {len(self.points)}"
            )
        return self.points[index].close

    def window(self, period: int) -> np.ndarray:
        """The `period` newest closes, newest first."""
        if period < 0 or period > len(self.points):
            raise PriceIndexError(
                f"window of {period} exceeds series of length {len(self.points)}"
            )
        return np.array([p.close for p in self.points[:period]], dtype=float)

    def latest(self) -> PricePoint:
        if not self.points:
            raise PriceIndexError("series is empty")
        return self.points[0]

    @classmethod
    def from_records(
        cls,
        records: Iterable[tuple[str, Optional[str]]],
        tz: ZoneInfo,
    ) -> "PriceSeries":
        """
        Build a series from provider (timestamp, close) string pairs.

        Records with an unparseable timestamp, a non-numeric, negative or
        non-finite close, or a repeated timestamp are dropped. Provider
        ordering is kept as-is.

        Raises:
            EmptySeriesError: If no record survives validation
        """
        points: list[PricePoint] = []
        seen: set[int] = set()
        dropped = 0

        for raw_ts, raw_close in records:
            try:
                ts = datetime.strptime(raw_ts, TIMESTAMP_FORMAT).replace(tzinfo=tz)
                point = PricePoint(
                    timestamp=int(ts.timestamp() * 1000),
                    close=float(raw_close),
                )
            except (TypeError, ValueError) as e:
                # pydantic ValidationError is a ValueError
                dropped += 1
                logger.debug(f"Dropping record {raw_ts!r}: {e}")
                continue

            if point.timestamp in seen:
                dropped += 1
                logger.debug(f"Dropping duplicate timestamp {raw_ts!r}")
                continue

            seen.add(point.timestamp)
            points.append(point)

        if dropped:
            logger.warning(f"Dropped {dropped} invalid price record(s)")

        if not points:
            raise EmptySeriesError("PriceSeries", "No valid price points in payload")

        if any(a.timestamp <= b.timestamp for a, b in zip(points, points[1:])):
            logger.warning("Provider records are not newest-first; indicators assume they are")

        return cls(points=tuple(points))
