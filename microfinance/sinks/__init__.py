"""Output sinks for exporting portfolio records and metrics."""

from microfinance.sinks.console import ConsoleSink
from microfinance.sinks.json_file import JsonFileSink

__all__ = ["ConsoleSink", "JsonFileSink"]
