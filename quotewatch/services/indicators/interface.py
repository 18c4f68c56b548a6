"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from quotewatch.services.base import BaseService
from quotewatch.schemas.indicators import IndicatorRequest, IndicatorReport


class IndicatorServiceInterface(BaseService[IndicatorRequest, IndicatorReport]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - symbol: Ticker the series belongs to
        - series: Newest-first PriceSeries for this cycle

    OUTPUT: IndicatorReport
        - Latest price plus the fixed indicator battery
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: IndicatorRequest) -> IndicatorReport:
        """Calculate the report for one series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
