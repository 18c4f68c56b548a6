"""
Indicator Engine Service Implementation

Calculates the per-cycle report from a PriceSeries.
Pure NumPy calculations, no I/O.
"""

from datetime import datetime
from typing import Optional

from quotewatch.schemas.indicators import IndicatorRequest, IndicatorReport
from quotewatch.schemas.market import PriceSeries
from quotewatch.services.base import EmptySeriesError
from quotewatch.services.indicators.interface import IndicatorServiceInterface
from quotewatch.services.indicators.calculations import (
    sma,
    ema,
    wma,
    standard_deviation,
    bollinger_bands,
    rsi,
)
from quotewatch.services.indicators.trend import classify_trend

# Report battery
SMA_PERIOD = 5
EMA_PERIOD = 10
WMA_PERIOD = 20
VOLATILITY_PERIOD = 20
BOLLINGER_MULTIPLIER = 2.0
TREND_SHORT_PERIOD = 10
TREND_LONG_PERIOD = 30
RSI_PERIOD = 14


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless: every call works only on the series it is given.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: IndicatorRequest) -> IndicatorReport:
        """Calculate the fixed indicator battery for one series."""
        return self.calculate(input_data.symbol, input_data.series)

    def calculate(self, symbol: str, series: PriceSeries) -> IndicatorReport:
        if len(series) == 0:
            raise EmptySeriesError(self.name, f"No prices to analyse for {symbol}")

        latest = series.latest()
        upper, middle, lower = bollinger_bands(
            series, VOLATILITY_PERIOD, BOLLINGER_MULTIPLIER
        )

        return IndicatorReport(
            symbol=symbol,
            generated_at=datetime.now(),
            point_count=len(series),
            latest_price=latest.close,
            latest_timestamp=latest.timestamp,
            sma_5=sma(series, SMA_PERIOD),
            ema_10=ema(series, EMA_PERIOD),
            wma_20=wma(series, WMA_PERIOD),
            std_dev_20=standard_deviation(series, VOLATILITY_PERIOD),
            bollinger_upper_20=upper,
            bollinger_middle_20=middle,
            bollinger_lower_20=lower,
            trend_10_30=classify_trend(series, TREND_SHORT_PERIOD, TREND_LONG_PERIOD),
            rsi_14=rsi(series, RSI_PERIOD),
        )

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
