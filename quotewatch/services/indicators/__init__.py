"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (symbol + PriceSeries)
    Output: IndicatorReport

RESPONSIBILITIES:
    - Moving averages (SMA, EMA, WMA)
    - Volatility (standard deviation, Bollinger Bands)
    - Trend classification (short vs long SMA)
    - Momentum (RSI)

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from quotewatch.services.indicators.interface import IndicatorServiceInterface
from quotewatch.services.indicators.service import IndicatorService, get_indicator_service
from quotewatch.services.indicators.trend import classify_trend

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "classify_trend",
]
