"""
Data Ingestion Service Interface

Defines the contract for the data ingestion layer and the quote sources
behind it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from quotewatch.services.base import BaseService
from quotewatch.schemas.market import DataRequest, PriceSeries


@dataclass
class QuoteBatch:
    """Raw (timestamp, close) records as delivered by a provider."""

    symbol: str
    timezone: str
    records: list[tuple[str, Optional[str]]] = field(default_factory=list)
    source: str = "unknown"


class QuoteSource(ABC):
    """
    A provider of intraday closing prices.

    Records must come back in the provider's order, which is expected to be
    newest first.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def fetch_records(self, symbol: str) -> QuoteBatch:
        """
        Fetch the latest intraday records for a symbol.

        Raises:
            FetchError: Provider unreachable or returned an error status
            ParseError: Payload unreadable or missing the time series
        """
        pass

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        """Release any held connections."""
        pass


class DataIngestionServiceInterface(BaseService[DataRequest, PriceSeries]):
    """
    Data Ingestion Service Contract.

    INPUT: DataRequest
        - symbol: Ticker to fetch

    OUTPUT: PriceSeries
        - Validated newest-first closing prices
    """

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @abstractmethod
    async def execute(self, input_data: DataRequest) -> PriceSeries:
        """Fetch and normalize the price series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the underlying quote source."""
        pass
