"""Derived market statistics over a listing snapshot."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from estate_ledger.models.enums import (
    Confidence,
    MarketPosition,
    Trend,
    TrendStrength,
)


@dataclass
class PricePerUnit:
    average_price_per_unit: int
    median_price_per_unit: int
    sample_size: int
    unit: str


@dataclass
class MonthlyPriceTrend:
    month: str  # YYYY-MM
    average_price: int
    median_price: int
    count: int
    average_price_per_unit: int


@dataclass
class MarketVelocity:
    average_days_to_sell: int
    median_days_to_sell: int
    inventory_turnover: float  # percent of matching listings sold
    absorption_rate: float  # sales per month, trailing 12 months
    sample_size: int


@dataclass
class PriceBucket:
    range: str
    count: int
    percentage: float
    min_price: Decimal
    max_price: Decimal | None  # None for the open-ended top bucket


@dataclass
class TrendDirection:
    trend: Trend
    change_percentage: float
    strength: TrendStrength


@dataclass
class PriceRange:
    min: int
    max: int
    spread: int


@dataclass
class MarketStatistics:
    total_listings: int
    active_listings: int
    sold_listings: int
    average_price: int
    median_price: int
    highest_price: int
    lowest_price: int
    average_price_per_unit: int
    market_velocity: MarketVelocity
    price_range: PriceRange


@dataclass
class MarketComparison:
    market_average: int
    price_difference: int
    percentage_difference: float
    status: MarketPosition
    recommendation: str


@dataclass
class PricingRecommendation:
    suggested_price: int
    confidence: Confidence
    min_price: int
    max_price: int
    factors: list[str] = field(default_factory=list)


@dataclass
class PriceChangeSummary:
    current_price: Decimal
    original_price: Decimal
    total_change: Decimal
    total_change_percentage: float
    number_of_changes: int
    last_change_date: datetime | None
    price_increases: int
    price_decreases: int
