"""
Shared fixtures for QuoteWatch tests.

Builders are handed out as fixtures so test modules never import this file.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from quotewatch.schemas.market import PricePoint, PriceSeries, TIMESTAMP_FORMAT

EASTERN = ZoneInfo("US/Eastern")
BASE_MS = 1_704_488_340_000  # 2024-01-05 15:59:00 US/Eastern

# Fixed 25-point synthetic sequence, newest first
SYNTHETIC_25 = (
    101.0, 100.5, 100.0, 99.5, 100.0,
    100.5, 101.0, 101.5, 102.0, 101.5,
    101.0, 100.5, 100.0, 99.5, 99.0,
    98.5, 99.0, 99.5, 100.0, 100.5,
    101.0, 101.5, 102.0, 102.5, 103.0,
)


def build_series(prices):
    """Newest-first series from a list of closes, one minute apart."""
    return PriceSeries(
        points=tuple(
            PricePoint(timestamp=BASE_MS - i * 60_000, close=price)
            for i, price in enumerate(prices)
        )
    )


def build_records(prices, start="2024-01-05 15:59:00"):
    """Newest-first provider records for the given closes."""
    ts = datetime.strptime(start, TIMESTAMP_FORMAT)
    return [
        ((ts - timedelta(minutes=i)).strftime(TIMESTAMP_FORMAT), f"{price:.4f}")
        for i, price in enumerate(prices)
    ]


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def make_records():
    return build_records


@pytest.fixture
def synthetic_prices():
    return list(SYNTHETIC_25)


@pytest.fixture
def synthetic_series():
    return build_series(SYNTHETIC_25)


@pytest.fixture
def eastern():
    return EASTERN
