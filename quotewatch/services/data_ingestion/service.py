"""
Data Ingestion Service Implementation

Fetches raw records from the configured quote source and normalizes them
into a fresh PriceSeries.
"""

import logging
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from quotewatch.core.config import Settings
from quotewatch.schemas.market import DataRequest, PriceSeries
from quotewatch.services.base import ParseError
from quotewatch.services.data_ingestion.interface import (
    DataIngestionServiceInterface,
    QuoteSource,
)
from quotewatch.services.data_ingestion.alphavantage_adapter import AlphaVantageSource
from quotewatch.services.data_ingestion.mock_data import MockQuoteSource

logger = logging.getLogger(__name__)


class DataIngestionService(DataIngestionServiceInterface):
    """
    Data Ingestion Service.

    One instance per run; every execute() call builds a brand-new series.
    """

    def __init__(self, source: QuoteSource):
        self._source = source

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @property
    def source(self) -> QuoteSource:
        return self._source

    async def execute(self, input_data: DataRequest) -> PriceSeries:
        """
        Fetch and normalize the price series.

        Raises:
            FetchError: Source unreachable
            ParseError: Payload unreadable or unknown time zone
            EmptySeriesError: No usable points
        """
        batch = await self._source.fetch_records(input_data.symbol)

        try:
            tz = ZoneInfo(batch.timezone)
        except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
            raise ParseError(
                self.name, f"Unknown provider time zone {batch.timezone!r}: {e}"
            )

        series = PriceSeries.from_records(batch.records, tz)
        logger.info(
            f"Got {len(series)} of {len(batch.records)} points for "
            f"{input_data.symbol} from {batch.source}"
        )
        return series

    async def health_check(self) -> bool:
        """Check the underlying quote source."""
        return await self._source.health_check()

    async def close(self) -> None:
        await self._source.close()


def build_quote_source(settings: Settings, api_key: Optional[str] = None) -> QuoteSource:
    """Pick the quote source for this run."""
    if settings.use_mock_data:
        logger.info("Using mock quote source (use_mock_data=true)")
        return MockQuoteSource(timezone=settings.provider_timezone)
    return AlphaVantageSource(settings, api_key=api_key)
