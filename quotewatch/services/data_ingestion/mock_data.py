"""
Mock Data Generator

Generates random-walk intraday quotes for offline runs and testing.
Records mimic the Alpha Vantage shape: newest first, one per minute.
"""

import random
from datetime import datetime, timedelta
from typing import Optional

from quotewatch.schemas.market import TIMESTAMP_FORMAT
from quotewatch.services.data_ingestion.interface import QuoteBatch, QuoteSource


# Base prices for common symbols
SYMBOL_BASE_PRICES = {
    "IBM": 160.0,
    "AAPL": 185.0,
    "MSFT": 370.0,
    "GOOGL": 140.0,
    "AMZN": 150.0,
    "TSLA": 240.0,
}


def get_base_price(symbol: str, rng: random.Random) -> float:
    """Get base price for a symbol."""
    return SYMBOL_BASE_PRICES.get(symbol, 50.0 + rng.random() * 200)


def generate_mock_records(
    symbol: str,
    lookback: int = 100,
    end_time: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> list[tuple[str, str]]:
    """Generate `lookback` one-minute closes, newest first."""
    rng = rng or random.Random()
    if end_time is None:
        end_time = datetime.now().replace(second=0, microsecond=0)

    price = get_base_price(symbol, rng)
    volatility = price * 0.002  # 0.2% per minute

    records = []
    timestamp = end_time
    for _ in range(lookback):
        records.append((timestamp.strftime(TIMESTAMP_FORMAT), f"{price:.4f}"))

        # Walk backwards in time
        price = max(0.01, price + (rng.random() - 0.5) * volatility)
        timestamp -= timedelta(minutes=1)

    return records


class MockQuoteSource(QuoteSource):
    """Quote source backed by generated data. Seed it for repeatable output."""

    def __init__(self, lookback: int = 100, seed: Optional[int] = None, timezone: str = "US/Eastern"):
        self._lookback = lookback
        self._rng = random.Random(seed)
        self._timezone = timezone

    @property
    def name(self) -> str:
        return "Mock"

    async def fetch_records(self, symbol: str) -> QuoteBatch:
        return QuoteBatch(
            symbol=symbol,
            timezone=self._timezone,
            records=generate_mock_records(symbol, self._lookback, rng=self._rng),
            source=self.name,
        )
