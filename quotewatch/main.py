"""
QuoteWatch - Intraday Indicator Monitor

Main entry point. Prompts for a symbol and update interval when they are
not given on the command line, then polls until interrupted.
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from quotewatch.core.config import AnalyzerConfig, Settings, get_settings
from quotewatch.services.data_ingestion import DataIngestionService, build_quote_source
from quotewatch.services.indicators import get_indicator_service
from quotewatch.services.polling import PollingLoop
from quotewatch.services.reporting import ConsoleReporter

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="quotewatch",
        description="Poll intraday quotes and print technical indicators.",
    )
    parser.add_argument("-s", "--symbol", help="Stock symbol, e.g. IBM")
    parser.add_argument("-i", "--interval", type=int, help="Update interval in seconds")
    parser.add_argument("-n", "--cycles", type=int, default=None, help="Stop after N cycles")
    parser.add_argument("--mock", action="store_true", help="Use generated quotes instead of Alpha Vantage")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser.parse_args(argv)


def prompt_inputs(args: argparse.Namespace, settings: Settings) -> tuple[str, int]:
    """Fill symbol and interval from flags, settings, or the terminal."""
    symbol = args.symbol or settings.default_symbol
    if not symbol:
        symbol = input("Enter stock symbol: ").strip()

    interval = args.interval if args.interval is not None else settings.default_update_interval
    while interval is None:
        raw = input("Enter update interval (in seconds): ").strip()
        try:
            interval = int(raw)
        except ValueError:
            print(f"Not a whole number of seconds: {raw!r}")

    return symbol, interval


def build_config(symbol: str, interval: int, settings: Settings) -> AnalyzerConfig:
    return AnalyzerConfig(
        symbol=symbol,
        update_interval=interval,
        api_key=settings.alphavantage_api_key,
    )


async def run_analyzer(
    config: AnalyzerConfig,
    settings: Settings,
    max_cycles: Optional[int] = None,
) -> PollingLoop:
    """Wire the services together and poll until stopped."""
    ingestion = DataIngestionService(build_quote_source(settings, api_key=config.api_key))
    loop = PollingLoop(
        config,
        ingestion,
        get_indicator_service(),
        ConsoleReporter(),
        retry_initial_delay=settings.retry_initial_delay,
        max_cycles=max_cycles,
    )

    event_loop = asyncio.get_running_loop()
    handled = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            event_loop.add_signal_handler(sig, loop.request_stop)
            handled.append(sig)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is unavailable on Windows event loops
            pass

    if not await ingestion.health_check():
        logger.warning("Quote source reports unhealthy; polling anyway")

    try:
        await loop.run()
    finally:
        for sig in handled:
            event_loop.remove_signal_handler(sig)
        await ingestion.close()

    return loop


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    if args.mock:
        settings = settings.model_copy(update={"use_mock_data": True})

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        symbol, interval = prompt_inputs(args, settings)
        config = build_config(symbol, interval, settings)
    except ValidationError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2
    except (EOFError, KeyboardInterrupt):
        return 1

    print(f"Starting {settings.app_name} v{settings.app_version} for {config.symbol}")

    try:
        asyncio.run(run_analyzer(config, settings, max_cycles=args.cycles))
    except KeyboardInterrupt:
        pass

    print("Shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
