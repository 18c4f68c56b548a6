"""
Technical Indicator Calculations

Pure NumPy implementations of the report indicators over a newest-first
PriceSeries. Each function looks only at the `period` most recent closes.

Insufficient data (series shorter than the window) returns None rather than
raising, so callers can tell it apart from a computed 0.0.
"""

from typing import Optional

import numpy as np

from quotewatch.schemas.market import PriceSeries


def _check_period(period: int) -> None:
    if period <= 0:
        raise ValueError(f"period must be a positive integer, got {period}")


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(series: PriceSeries, period: int) -> Optional[float]:
    """Simple Moving Average of the `period` newest closes."""
    _check_period(period)
    if len(series) < period:
        return None

    return float(np.mean(series.window(period)))


def ema(series: PriceSeries, period: int) -> Optional[float]:
    """
    Exponential Moving Average over a bounded window.

    Seeded with the newest close, then blended through indices 1..period-1
    with alpha = 2 / (period + 1). Only the first `period` points are used.
    """
    _check_period(period)
    if len(series) < period:
        return None

    window = series.window(period)
    alpha = 2.0 / (period + 1)

    result = window[0]
    for price in window[1:]:
        result = alpha * price + (1 - alpha) * result

    return float(result)


def wma(series: PriceSeries, period: int) -> Optional[float]:
    """Weighted Moving Average, weight `period - i` for index i."""
    _check_period(period)
    if len(series) < period:
        return None

    weights = np.arange(period, 0, -1, dtype=float)
    return float(np.dot(series.window(period), weights) / np.sum(weights))


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def standard_deviation(series: PriceSeries, period: int) -> Optional[float]:
    """Population standard deviation (divide by period) around the SMA."""
    _check_period(period)
    if len(series) < period:
        return None

    window = series.window(period)
    # Rounding in the mean can leave a residue on constant windows
    if np.all(window == window[0]):
        return 0.0

    mean = np.mean(window)
    return float(np.sqrt(np.sum((window - mean) ** 2) / period))


def bollinger_band(
    series: PriceSeries, period: int, multiplier: float, upper: bool
) -> Optional[float]:
    """Upper (SMA + m*std) or lower (SMA - m*std) Bollinger Band."""
    middle = sma(series, period)
    std = standard_deviation(series, period)
    if middle is None or std is None:
        return None

    return middle + multiplier * std if upper else middle - multiplier * std


def bollinger_bands(
    series: PriceSeries, period: int = 20, multiplier: float = 2.0
) -> tuple[Optional[float], Optional[float], Optional[float]]:
    """
    Bollinger Bands.

    Returns: (upper, middle, lower)
    """
    middle = sma(series, period)
    std = standard_deviation(series, period)
    if middle is None or std is None:
        return None, None, None

    return middle + multiplier * std, middle, middle - multiplier * std


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(series: PriceSeries, period: int = 14) -> Optional[float]:
    """
    Relative Strength Index over `period` changes (needs period + 1 points).

    change_i = price[i-1] - price[i] for i in 1..period. A window with no
    losses (including a flat one) is clamped to 100.
    """
    _check_period(period)
    if len(series) < period + 1:
        return None

    # np.diff gives price[i] - price[i-1]; flip the sign
    changes = -np.diff(series.window(period + 1))

    avg_gain = np.sum(changes[changes > 0]) / period
    avg_loss = -np.sum(changes[changes <= 0]) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def value_or_zero(value: Optional[float]) -> float:
    """Render an insufficient-data result as the legacy 0.0."""
    return 0.0 if value is None else value
