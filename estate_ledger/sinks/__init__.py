"""Output sinks for ledger mutation events."""

from estate_ledger.sinks.console import ConsoleSink
from estate_ledger.sinks.jsonl_file import JsonLinesSink

__all__ = ["ConsoleSink", "JsonLinesSink"]
