from quotewatch.services.reporting.console import ConsoleReporter, format_report

__all__ = ["ConsoleReporter", "format_report"]
