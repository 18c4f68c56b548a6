"""
Console Reporter

Renders an IndicatorReport as the plain-text block printed every cycle.
"""

import sys
from typing import Optional, TextIO

from quotewatch.schemas.indicators import IndicatorReport

NOT_AVAILABLE = "n/a (insufficient data)"


def _money(value: Optional[float]) -> str:
    return NOT_AVAILABLE if value is None else f"${value:.2f}"


def _number(value: Optional[float], digits: int = 2) -> str:
    return NOT_AVAILABLE if value is None else f"{value:.{digits}f}"


def format_report(report: IndicatorReport, next_update_seconds: Optional[int] = None) -> str:
    """Build the text report for one cycle."""
    lines = [
        f"Analysis for {report.symbol}:",
        f"Latest price: {_money(report.latest_price)}",
        "Moving Averages:",
        f"  5-period SMA: {_money(report.sma_5)}",
        f"  10-period EMA: {_money(report.ema_10)}",
        f"  20-period WMA: {_money(report.wma_20)}",
        "Volatility:",
        f"  20-period Standard Deviation: {_money(report.std_dev_20)}",
    ]

    if report.bollinger_upper_20 is None or report.bollinger_lower_20 is None:
        lines.append(f"  20-period Bollinger Bands: {NOT_AVAILABLE}")
    else:
        lines.append(
            f"  20-period Bollinger Bands: {_money(report.bollinger_upper_20)} (upper), "
            f"{_money(report.bollinger_lower_20)} (lower)"
        )

    lines += [
        "Trend Detection:",
        f"  Short-term trend (10 vs 30 periods): {report.trend_10_30.value}",
        f"  14-period RSI: {_number(report.rsi_14)}",
    ]

    if next_update_seconds is not None:
        lines += ["", f"Next update in {next_update_seconds} seconds..."]

    return "\n".join(lines) + "\n"


class ConsoleReporter:
    """Writes reports to a text stream (stdout unless told otherwise)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def render(self, report: IndicatorReport, next_update_seconds: Optional[int] = None) -> None:
        stream = self._stream or sys.stdout
        stream.write(format_report(report, next_update_seconds) + "\n")
        stream.flush()
