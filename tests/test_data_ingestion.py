"""
Unit tests for data ingestion
=============================
Alpha Vantage payload parsing, transport error translation, the mock
source and the ingestion service.
"""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from quotewatch.core.config import Settings
from quotewatch.schemas.market import DataRequest
from quotewatch.services.base import EmptySeriesError, FetchError, ParseError
from quotewatch.services.data_ingestion import (
    AlphaVantageSource,
    DataIngestionService,
    MockQuoteSource,
    QuoteBatch,
    build_quote_source,
    parse_intraday_payload,
)


def intraday_body(records, timezone="US/Eastern"):
    return json.dumps({
        "Meta Data": {
            "1. Information": "Intraday (1min) open, high, low, close prices and volume",
            "2. Symbol": "IBM",
            "4. Interval": "1min",
            "6. Time Zone": timezone,
        },
        "Time Series (1min)": {
            ts: {
                "1. open": close,
                "2. high": close,
                "3. low": close,
                "4. close": close,
                "5. volume": "100",
            }
            for ts, close in records
        },
    })


@pytest.fixture
def settings():
    return Settings(_env_file=None, alphavantage_api_key="demo")


class TestParseIntradayPayload:
    """Raw body -> QuoteBatch"""

    def test_records_in_provider_order(self, make_records):
        records = make_records([159.16, 159.10, 159.05])
        batch = parse_intraday_payload(intraday_body(records), "IBM")

        assert batch.symbol == "IBM"
        assert batch.timezone == "US/Eastern"
        assert batch.records == records
        assert batch.source == "AlphaVantage"

    def test_entry_without_close_kept_as_none(self, make_records):
        body = json.loads(intraday_body(make_records([1.0])))
        body["Time Series (1min)"]["2024-01-05 15:58:00"] = {"1. open": "1.0"}

        batch = parse_intraday_payload(json.dumps(body), "IBM")

        assert batch.records[-1] == ("2024-01-05 15:58:00", None)

    def test_missing_timezone_uses_default(self, make_records):
        body = json.loads(intraday_body(make_records([1.0])))
        del body["Meta Data"]

        batch = parse_intraday_payload(json.dumps(body), "IBM", default_timezone="UTC")

        assert batch.timezone == "UTC"

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            parse_intraday_payload("<html>oops</html>", "IBM")

    def test_empty_body(self):
        with pytest.raises(ParseError):
            parse_intraday_payload("", "IBM")

    def test_missing_time_series_key(self):
        with pytest.raises(ParseError, match="Time Series"):
            parse_intraday_payload(json.dumps({"Meta Data": {}}), "IBM")

    def test_non_object_meta_data(self, make_records):
        body = json.loads(intraday_body(make_records([1.0])))
        body["Meta Data"] = "oops"

        with pytest.raises(ParseError, match="Meta Data"):
            parse_intraday_payload(json.dumps(body), "IBM")

    def test_non_string_timezone(self, make_records):
        body = json.loads(intraday_body(make_records([1.0])))
        body["Meta Data"]["6. Time Zone"] = 123

        with pytest.raises(ParseError, match="Time Zone"):
            parse_intraday_payload(json.dumps(body), "IBM")

    @pytest.mark.parametrize("notice", ["Note", "Information", "Error Message"])
    def test_provider_notice(self, notice):
        body = json.dumps({notice: "Thank you for using Alpha Vantage!"})

        with pytest.raises(ParseError, match="Thank you") as exc_info:
            parse_intraday_payload(body, "IBM")

        assert exc_info.value.details["notice"] == notice

    def test_other_interval_key(self, make_records):
        body = intraday_body(make_records([1.0])).replace("(1min)", "(5min)")
        batch = parse_intraday_payload(body, "IBM", interval="5min")

        assert len(batch.records) == 1


class TestAlphaVantageSource:
    """HTTP layer, with the request itself patched out"""

    @pytest.mark.asyncio
    async def test_fetch_records(self, settings, make_records):
        source = AlphaVantageSource(settings)
        body = intraday_body(make_records([10.0, 9.0]))

        with patch.object(source, "_request", AsyncMock(return_value=body)) as request:
            batch = await source.fetch_records("IBM")

        params = request.call_args.args[0]
        assert params["function"] == "TIME_SERIES_INTRADAY"
        assert params["symbol"] == "IBM"
        assert params["interval"] == "1min"
        assert params["apikey"] == "demo"
        assert len(batch.records) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        aiohttp.ClientConnectionError("connection refused"),
        asyncio.TimeoutError(),
    ])
    async def test_transport_errors_become_fetch_error(self, settings, error):
        source = AlphaVantageSource(settings)

        with patch.object(source, "_request", AsyncMock(side_effect=error)):
            with pytest.raises(FetchError):
                await source.fetch_records("IBM")

    @pytest.mark.asyncio
    async def test_health_check_requires_key(self):
        source = AlphaVantageSource(Settings(_env_file=None, alphavantage_api_key=None))
        assert await source.health_check() is False

    @pytest.mark.asyncio
    async def test_explicit_key_overrides_settings(self, settings):
        source = AlphaVantageSource(settings, api_key="secret")
        assert source._build_params("IBM")["apikey"] == "secret"

    @pytest.mark.asyncio
    async def test_close_without_session(self, settings):
        await AlphaVantageSource(settings).close()


@pytest_asyncio.fixture
async def provider_server():
    """Local HTTP server answering /query with a scripted status and body."""
    reply = {"status": 200, "body": ""}

    async def query(request):
        reply["params"] = dict(request.query)
        return web.Response(status=reply["status"], text=reply["body"])

    app = web.Application()
    app.router.add_get("/query", query)
    server = test_utils.TestServer(app, host="127.0.0.1")
    await server.start_server()
    reply["url"] = str(server.make_url("/query"))
    yield reply
    await server.close()


class TestAlphaVantageHTTP:
    """Real requests against a local server"""

    @pytest.mark.asyncio
    async def test_non_200_status_raises_fetch_error(self, settings, provider_server):
        provider_server.update(status=503, body="Service Unavailable")
        settings = settings.model_copy(update={"alphavantage_base_url": provider_server["url"]})
        source = AlphaVantageSource(settings)

        try:
            with pytest.raises(FetchError, match="HTTP 503") as exc_info:
                await source.fetch_records("IBM")
        finally:
            await source.close()

        assert exc_info.value.details["status"] == 503
        assert exc_info.value.details["body"] == "Service Unavailable"

    @pytest.mark.asyncio
    async def test_ok_response_is_parsed(self, settings, provider_server, make_records):
        provider_server["body"] = intraday_body(make_records([10.0, 9.0, 8.0]))
        settings = settings.model_copy(update={"alphavantage_base_url": provider_server["url"]})
        source = AlphaVantageSource(settings)

        try:
            batch = await source.fetch_records("IBM")
        finally:
            await source.close()

        assert len(batch.records) == 3
        assert provider_server["params"]["function"] == "TIME_SERIES_INTRADAY"
        assert provider_server["params"]["symbol"] == "IBM"
        assert provider_server["params"]["apikey"] == "demo"


class TestMockQuoteSource:
    """Generated quotes"""

    @pytest.mark.asyncio
    async def test_seeded_source_is_repeatable(self):
        first = await MockQuoteSource(lookback=50, seed=7).fetch_records("IBM")
        second = await MockQuoteSource(lookback=50, seed=7).fetch_records("IBM")

        assert [c for _, c in first.records] == [c for _, c in second.records]
        assert len(first.records) == 50

    @pytest.mark.asyncio
    async def test_records_build_a_series(self):
        source = MockQuoteSource(lookback=40, seed=1)
        series = await DataIngestionService(source).execute(DataRequest(symbol="AAPL"))

        assert len(series) == 40
        assert all(a.timestamp > b.timestamp for a, b in zip(series.points, series.points[1:]))


class FakeSource(MockQuoteSource):
    def __init__(self, batch):
        super().__init__()
        self._batch = batch

    async def fetch_records(self, symbol):
        return self._batch


class TestDataIngestionService:
    """Batch -> PriceSeries"""

    @pytest.mark.asyncio
    async def test_malformed_record_dropped(self, make_records):
        records = make_records([10.0, 9.0, 8.0]) + [("garbage", "1.0")]
        service = DataIngestionService(FakeSource(QuoteBatch("IBM", "US/Eastern", records)))

        series = await service.execute(DataRequest(symbol="IBM"))

        assert len(series) == 3

    @pytest.mark.asyncio
    async def test_no_valid_records(self):
        batch = QuoteBatch("IBM", "US/Eastern", [("garbage", "x")])
        service = DataIngestionService(FakeSource(batch))

        with pytest.raises(EmptySeriesError):
            await service.execute(DataRequest(symbol="IBM"))

    @pytest.mark.asyncio
    async def test_unknown_timezone(self, make_records):
        batch = QuoteBatch("IBM", "Mars/Olympus_Mons", make_records([1.0]))
        service = DataIngestionService(FakeSource(batch))

        with pytest.raises(ParseError):
            await service.execute(DataRequest(symbol="IBM"))

    @pytest.mark.asyncio
    async def test_non_string_timezone(self, make_records):
        batch = QuoteBatch("IBM", 123, make_records([1.0]))
        service = DataIngestionService(FakeSource(batch))

        with pytest.raises(ParseError):
            await service.execute(DataRequest(symbol="IBM"))

    @pytest.mark.asyncio
    async def test_each_call_builds_a_new_series(self):
        service = DataIngestionService(MockQuoteSource(lookback=10, seed=3))

        first = await service.execute(DataRequest(symbol="IBM"))
        second = await service.execute(DataRequest(symbol="IBM"))

        assert first is not second

    def test_build_quote_source(self, settings):
        assert isinstance(build_quote_source(settings), AlphaVantageSource)

        mock_settings = settings.model_copy(update={"use_mock_data": True})
        assert isinstance(build_quote_source(mock_settings), MockQuoteSource)
