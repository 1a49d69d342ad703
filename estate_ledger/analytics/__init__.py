"""Descriptive market statistics over listing snapshots."""

from estate_ledger.analytics.market import (
    add_price_history,
    average_price_per_unit,
    classify_trend,
    compare_to_market,
    market_statistics,
    market_trend_direction,
    market_velocity,
    median_price_per_unit,
    price_change_summary,
    price_distribution,
    price_trends,
    pricing_recommendation,
)

__all__ = [
    "add_price_history",
    "average_price_per_unit",
    "classify_trend",
    "compare_to_market",
    "market_statistics",
    "market_trend_direction",
    "market_velocity",
    "median_price_per_unit",
    "price_change_summary",
    "price_distribution",
    "price_trends",
    "pricing_recommendation",
]
