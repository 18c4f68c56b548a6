"""
CONTRACT 2: Indicator Engine

Input: IndicatorRequest (symbol + PriceSeries)
Output: IndicatorReport

This module describes the values produced by the indicator layer.
Every numeric indicator is Optional: None means the series was too short
for the requested window, which is distinct from a computed 0.0.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from quotewatch.schemas.market import PriceSeries


# =============================================================================
# ENUMS
# =============================================================================


class TrendLabel(str, Enum):
    UPTREND = "Uptrend"
    DOWNTREND = "Downtrend"
    SIDEWAYS = "Sideways"
    INSUFFICIENT_DATA = "Insufficient data"


# =============================================================================
# INPUT: IndicatorRequest
# =============================================================================


class IndicatorRequest(BaseModel):
    """
    Request for the per-cycle indicator report.
    Sent by: Polling Loop
    Received by: Indicator Service
    """

    symbol: str
    series: PriceSeries


# =============================================================================
# OUTPUT: IndicatorReport
# =============================================================================


class IndicatorReport(BaseModel):
    """Fixed indicator battery for one polling cycle."""

    symbol: str
    generated_at: datetime
    point_count: int = Field(..., ge=0)

    # Price
    latest_price: float = Field(..., ge=0)
    latest_timestamp: int = Field(..., description="Milliseconds since epoch")

    # Moving averages
    sma_5: Optional[float] = None
    ema_10: Optional[float] = None
    wma_20: Optional[float] = None

    # Volatility
    std_dev_20: Optional[float] = None
    bollinger_upper_20: Optional[float] = None
    bollinger_middle_20: Optional[float] = None
    bollinger_lower_20: Optional[float] = None

    # Trend / momentum
    trend_10_30: TrendLabel = TrendLabel.INSUFFICIENT_DATA
    rsi_14: Optional[float] = Field(default=None, ge=0, le=100)

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "IBM",
                "generated_at": "2024-01-05T16:00:05",
                "point_count": 100,
                "latest_price": 159.16,
                "latest_timestamp": 1704488340000,
                "sma_5": 159.1,
                "ema_10": 159.02,
                "wma_20": 159.05,
                "std_dev_20": 0.0812,
                "bollinger_upper_20": 159.19,
                "bollinger_middle_20": 159.03,
                "bollinger_lower_20": 158.86,
                "trend_10_30": "Uptrend",
                "rsi_14": 61.54,
            }
        }
