"""
Alpha Vantage Data Adapter

Fetches intraday closing prices from the Alpha Vantage
TIME_SERIES_INTRADAY endpoint.

Alpha Vantage API Documentation: https://www.alphavantage.co/documentation/
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from quotewatch.core.config import Settings
from quotewatch.services.base import FetchError, ParseError
from quotewatch.services.data_ingestion.interface import QuoteBatch, QuoteSource

logger = logging.getLogger(__name__)

CLOSE_FIELD = "4. close"
META_KEY = "Meta Data"
TIMEZONE_FIELD = "6. Time Zone"

# Keys Alpha Vantage uses instead of data when it refuses a request
NOTICE_KEYS = ("Error Message", "Note", "Information")


def time_series_key(interval: str) -> str:
    return f"Time Series ({interval})"


def parse_intraday_payload(
    text: str,
    symbol: str,
    interval: str = "1min",
    default_timezone: str = "US/Eastern",
) -> QuoteBatch:
    """
    Turn a raw TIME_SERIES_INTRADAY response body into a QuoteBatch.

    Entries without a close field are kept with a None close so the
    series builder can drop and count them.

    Raises:
        ParseError: Body is not JSON, is a provider notice, lacks the
            time series key, or carries malformed metadata
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError("AlphaVantage", f"Invalid JSON for {symbol}: {e}")

    if not isinstance(payload, dict):
        raise ParseError("AlphaVantage", f"Unexpected payload type for {symbol}")

    key = time_series_key(interval)
    series = payload.get(key)
    if not isinstance(series, dict):
        for notice in NOTICE_KEYS:
            if notice in payload:
                raise ParseError(
                    "AlphaVantage",
                    f"Provider refused request for {symbol}: {payload[notice]}",
                    details={"notice": notice},
                )
        raise ParseError("AlphaVantage", f"Payload for {symbol} has no '{key}' key")

    meta = payload.get(META_KEY) or {}
    if not isinstance(meta, dict):
        raise ParseError("AlphaVantage", f"Malformed '{META_KEY}' for {symbol}")

    timezone = meta.get(TIMEZONE_FIELD) or default_timezone
    if not isinstance(timezone, str):
        raise ParseError(
            "AlphaVantage",
            f"Malformed '{TIMEZONE_FIELD}' for {symbol}: {timezone!r}",
        )

    records = []
    for ts, entry in series.items():
        close = entry.get(CLOSE_FIELD) if isinstance(entry, dict) else None
        records.append((ts, close))

    return QuoteBatch(
        symbol=symbol,
        timezone=timezone,
        records=records,
        source="AlphaVantage",
    )


class AlphaVantageSource(QuoteSource):
    """
    Alpha Vantage REST client wrapper.

    Usage:
        source = AlphaVantageSource(settings, api_key)
        batch = await source.fetch_records("IBM")
        await source.close()
    """

    def __init__(self, settings: Settings, api_key: Optional[str] = None):
        self._settings = settings
        self._api_key = api_key or settings.alphavantage_api_key
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "AlphaVantage"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(
                    total=self._settings.request_timeout_seconds
                ),
                headers={"Accept": "application/json"},
            )
        return self._session

    def _build_params(self, symbol: str) -> Dict[str, Any]:
        return {
            "function": "TIME_SERIES_INTRADAY",
            "symbol": symbol,
            "interval": self._settings.intraday_interval,
            "outputsize": self._settings.output_size,
            "apikey": self._api_key or "",
        }

    async def _request(self, params: Dict[str, Any]) -> str:
        """GET the endpoint and return the body text."""
        session = await self._ensure_session()
        async with session.get(self._settings.alphavantage_base_url, params=params) as resp:
            body = await resp.text()
            if resp.status != 200:
                raise FetchError(
                    self.name,
                    f"HTTP {resp.status} from provider",
                    details={"status": resp.status, "body": body[:200]},
                )
            return body

    async def fetch_records(self, symbol: str) -> QuoteBatch:
        """Fetch the latest intraday records for a symbol."""
        logger.info(f"Fetching {symbol} from Alpha Vantage...")

        try:
            text = await self._request(self._build_params(symbol))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(self.name, f"Request for {symbol} failed: {e!r}")

        batch = parse_intraday_payload(
            text,
            symbol,
            interval=self._settings.intraday_interval,
            default_timezone=self._settings.provider_timezone,
        )
        logger.debug(f"Alpha Vantage returned {len(batch.records)} records for {symbol}")
        return batch

    async def health_check(self) -> bool:
        """A key is required for anything but the demo symbol."""
        if not self._api_key:
            logger.warning("Alpha Vantage API key not configured")
            return False
        return True

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
