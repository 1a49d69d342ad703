"""Ledger, financial aggregation and market analytics for a real-estate agency."""

__version__ = "0.1.0"
