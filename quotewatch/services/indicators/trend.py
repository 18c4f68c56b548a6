"""
Trend Detection

Classifies the short-term trend by comparing a short and a long SMA.
"""

from quotewatch.schemas.indicators import TrendLabel
from quotewatch.schemas.market import PriceSeries
from quotewatch.services.indicators.calculations import sma


def classify_trend(
    series: PriceSeries, short_period: int, long_period: int
) -> TrendLabel:
    """
    Compare SMA(short_period) against SMA(long_period).

    The tie-break is exact float equality; nearly equal averages still
    count as a trend.
    """
    if len(series) < long_period:
        return TrendLabel.INSUFFICIENT_DATA

    short_ma = sma(series, short_period)
    long_ma = sma(series, long_period)
    if short_ma is None or long_ma is None:
        return TrendLabel.INSUFFICIENT_DATA

    if short_ma > long_ma:
        return TrendLabel.UPTREND
    elif short_ma < long_ma:
        return TrendLabel.DOWNTREND
    else:
        return TrendLabel.SIDEWAYS
