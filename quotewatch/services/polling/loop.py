"""
Polling Loop

Fetches a fresh price series on a fixed cadence, computes the indicator
report and hands it to the reporter.

Features:
- One cycle at a time, never overlapping
- Failed cycles are logged and retried with a growing delay
- Cooperative shutdown that interrupts the wait between cycles
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from quotewatch.core.config import AnalyzerConfig
from quotewatch.schemas.indicators import IndicatorReport, IndicatorRequest
from quotewatch.schemas.market import DataRequest
from quotewatch.services.base import (
    EmptySeriesError,
    FetchError,
    ParseError,
    ServiceError,
)
from quotewatch.services.data_ingestion.interface import DataIngestionServiceInterface
from quotewatch.services.indicators.interface import IndicatorServiceInterface
from quotewatch.services.reporting.console import ConsoleReporter

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class PollingLoop:
    """
    Periodic analysis task for a single symbol.

    Usage:
        loop = PollingLoop(config, ingestion, indicators, ConsoleReporter())
        await loop.start()
        ...
        await loop.stop()
    """

    def __init__(
        self,
        config: AnalyzerConfig,
        ingestion: DataIngestionServiceInterface,
        indicators: IndicatorServiceInterface,
        reporter: ConsoleReporter,
        retry_initial_delay: float = 5.0,
        max_cycles: Optional[int] = None,
    ):
        self._config = config
        self._ingestion = ingestion
        self._indicators = indicators
        self._reporter = reporter
        self._retry_initial_delay = retry_initial_delay
        self._retry_delay = retry_initial_delay
        self._max_cycles = max_cycles

        self._state = LoopState.IDLE
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._cycles_attempted = 0
        self._cycles_completed = 0
        self._consecutive_failures = 0
        self._last_report: Optional[IndicatorReport] = None

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def config(self) -> AnalyzerConfig:
        return self._config

    @property
    def cycles_attempted(self) -> int:
        return self._cycles_attempted

    @property
    def cycles_completed(self) -> int:
        """Cycles that produced and rendered a report."""
        return self._cycles_completed

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def last_report(self) -> Optional[IndicatorReport]:
        return self._last_report

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ============ Lifecycle ============

    async def start(self) -> None:
        """Run the loop as a background task."""
        if self.is_running:
            logger.warning("Polling loop already running")
            return

        if not await self._ingestion.health_check():
            logger.warning("Quote source reports unhealthy; polling anyway")

        self._stop_event.clear()
        self._task = asyncio.create_task(self.run())
        logger.info(
            f"Polling {self._config.symbol} every {self._config.update_interval}s"
        )

    def request_stop(self) -> None:
        """Ask the loop to finish after the current cycle."""
        self._stop_event.set()

    async def stop(self) -> None:
        """Stop the loop and wait for it to finish."""
        self.request_stop()

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._state = LoopState.STOPPED
        logger.info("Polling loop stopped")

    # ============ Main Loop ============

    async def run(self) -> None:
        """Cycle until stopped or max_cycles is reached."""
        try:
            while not self._stop_event.is_set() and not self._cycle_limit_reached():
                report = await self.run_cycle()

                if self._cycle_limit_reached():
                    break

                delay = self._config.update_interval if report else self._next_retry_delay()
                self._state = LoopState.SLEEPING
                if await self._wait(delay):
                    break
        finally:
            self._state = LoopState.STOPPED

    async def run_cycle(self) -> Optional[IndicatorReport]:
        """
        Execute one fetch -> compute -> report cycle.

        Returns the report, or None when the cycle failed.
        """
        self._state = LoopState.FETCHING
        symbol = self._config.symbol
        self._cycles_attempted += 1

        try:
            series = await self._ingestion.execute(DataRequest(symbol=symbol))
            report = await self._indicators.execute(
                IndicatorRequest(symbol=symbol, series=series)
            )
            self._reporter.render(report, next_update_seconds=self._config.update_interval)
        except FetchError as e:
            return self._record_failure(f"Fetch failed for {symbol}: {e}")
        except ParseError as e:
            return self._record_failure(f"Could not parse payload for {symbol}: {e}")
        except EmptySeriesError as e:
            return self._record_failure(f"No usable prices for {symbol}: {e}")
        except ServiceError as e:
            return self._record_failure(f"Cycle failed for {symbol}: {e}")
        except Exception:
            logger.exception(f"Unexpected error during cycle for {symbol}")
            return self._record_failure(None)

        self._cycles_completed += 1
        self._consecutive_failures = 0
        self._retry_delay = self._retry_initial_delay
        self._last_report = report
        return report

    # ============ Helpers ============

    def _cycle_limit_reached(self) -> bool:
        return self._max_cycles is not None and self._cycles_attempted >= self._max_cycles

    def _record_failure(self, message: Optional[str]) -> None:
        if message:
            logger.error(message)
        self._consecutive_failures += 1
        return None

    def _next_retry_delay(self) -> float:
        """Doubling retry delay, capped at the update interval."""
        delay = min(self._retry_delay, self._config.update_interval)
        self._retry_delay = min(self._retry_delay * 2, self._config.update_interval)
        logger.info(f"Retrying in {delay:g}s (failure #{self._consecutive_failures})")
        return delay

    async def _wait(self, seconds: float) -> bool:
        """Sleep for `seconds`; True if a stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
            return True
        except asyncio.TimeoutError:
            return False
