"""
QuoteWatch Schema Contracts

This module defines the contracts between system components.
"""

from quotewatch.schemas.market import (
    DataRequest,
    PricePoint,
    PriceSeries,
    PriceIndexError,
)
from quotewatch.schemas.indicators import (
    IndicatorRequest,
    IndicatorReport,
    TrendLabel,
)

__all__ = [
    # Market
    "DataRequest",
    "PricePoint",
    "PriceSeries",
    "PriceIndexError",
    # Indicators
    "IndicatorRequest",
    "IndicatorReport",
    "TrendLabel",
]
