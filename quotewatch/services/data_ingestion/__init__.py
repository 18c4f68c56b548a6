"""
Data Ingestion Service

CONTRACT:
    Input:  DataRequest
    Output: PriceSeries

RESPONSIBILITIES:
    - Fetch intraday quotes from Alpha Vantage (or the mock source)
    - Surface transport and payload problems as FetchError / ParseError
    - Normalize records into a validated newest-first PriceSeries
"""

from quotewatch.services.data_ingestion.interface import (
    DataIngestionServiceInterface,
    QuoteBatch,
    QuoteSource,
)
from quotewatch.services.data_ingestion.alphavantage_adapter import (
    AlphaVantageSource,
    parse_intraday_payload,
)
from quotewatch.services.data_ingestion.mock_data import MockQuoteSource
from quotewatch.services.data_ingestion.service import (
    DataIngestionService,
    build_quote_source,
)

__all__ = [
    "DataIngestionServiceInterface",
    "QuoteBatch",
    "QuoteSource",
    "AlphaVantageSource",
    "parse_intraday_payload",
    "MockQuoteSource",
    "DataIngestionService",
    "build_quote_source",
]
