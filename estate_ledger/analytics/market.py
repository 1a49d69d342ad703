"""Market intelligence and pricing analytics over a listing snapshot.

Every function takes the listings to analyze and recomputes from scratch;
nothing is cached between calls. Price statistics only consider listings
that are ``available`` or ``sold`` and carry a positive price. City filters
compare case-insensitively.
"""

from __future__ import annotations

import calendar
import math
import statistics
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from estate_ledger.models.enums import (
    Confidence,
    ListingStatus,
    MarketPosition,
    PropertyCondition,
    PropertyType,
    Trend,
    TrendStrength,
)
from estate_ledger.models.listing import Listing, PriceHistoryEntry
from estate_ledger.models.market import (
    MarketComparison,
    MarketStatistics,
    MarketVelocity,
    MonthlyPriceTrend,
    PriceBucket,
    PriceChangeSummary,
    PricePerUnit,
    PriceRange,
    PricingRecommendation,
    TrendDirection,
)

DEFAULT_AREA_UNIT = "sq-yards"
PRICED_STATUSES = (ListingStatus.AVAILABLE, ListingStatus.SOLD)

# (label, lower bound inclusive, upper bound exclusive) in PKR
PRICE_RANGES: tuple[tuple[str, Decimal, Decimal | None], ...] = (
    ("Under 5M", Decimal("0"), Decimal("5000000")),
    ("5M - 10M", Decimal("5000000"), Decimal("10000000")),
    ("10M - 20M", Decimal("10000000"), Decimal("20000000")),
    ("20M - 50M", Decimal("20000000"), Decimal("50000000")),
    ("50M - 100M", Decimal("50000000"), Decimal("100000000")),
    ("Over 100M", Decimal("100000000"), None),
)

TREND_THRESHOLD = Decimal("5")
STRONG_TREND_THRESHOLD = Decimal("15")
MARKET_BAND = Decimal("10")


# ============================================================================
# Helpers
# ============================================================================


def _round(value: Decimal | float | int) -> int:
    """Round half away from zero to an integer."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _round2(value: Decimal | float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _median(values: Sequence[Decimal | int]) -> Decimal:
    return Decimal(str(statistics.median(values)))


def _mean(values: Sequence[Decimal | int]) -> Decimal:
    return Decimal(sum(values)) / Decimal(len(values))


def _months_ago(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(month_index, 12)
    day = min(moment.day, calendar.monthrange(year, month + 1)[1])
    return moment.replace(year=year, month=month + 1, day=day)


def _filter(
    listings: Iterable[Listing],
    property_type: PropertyType | str | None = None,
    city: str | None = None,
    area_unit: str | None = None,
) -> list[Listing]:
    wanted_type = PropertyType(property_type) if property_type else None
    wanted_city = city.lower() if city else None
    return [
        listing
        for listing in listings
        if (wanted_type is None or listing.property_type == wanted_type)
        and (wanted_city is None or (listing.city or "").lower() == wanted_city)
        and (area_unit is None or listing.area_unit == area_unit)
    ]


def _price(listing: Listing) -> Decimal:
    return listing.price if listing.price is not None else Decimal("0")


def _prices(listings: Iterable[Listing]) -> list[Decimal]:
    return [_price(listing) for listing in listings if _price(listing) > 0]


def _prices_per_unit(listings: Iterable[Listing]) -> list[Decimal]:
    return [
        _price(listing) / Decimal(str(listing.area))
        for listing in listings
        if listing.area > 0 and _price(listing) > 0
    ]


# ============================================================================
# Price history
# ============================================================================


def add_price_history(
    listing: Listing,
    new_price: Decimal,
    reason: str | None = None,
    changed_by: str | None = None,
    now: datetime | None = None,
) -> PriceHistoryEntry:
    """Build the history entry for changing ``listing`` to ``new_price``.

    The listing itself is left untouched; callers append the entry and
    update the price.
    """
    old_price = _price(listing)
    change_amount = new_price - old_price
    change_percentage = float(change_amount / old_price * 100) if old_price > 0 else 0.0

    return PriceHistoryEntry(
        price=new_price,
        date=now or datetime.now(),
        change_amount=change_amount,
        change_percentage=change_percentage,
        reason=reason,
        changed_by=changed_by,
    )


def price_change_summary(listing: Listing) -> PriceChangeSummary:
    """Summarize asking-price changes recorded on a listing."""
    current_price = _price(listing)
    history = listing.price_history

    if not history:
        return PriceChangeSummary(
            current_price=current_price,
            original_price=current_price,
            total_change=Decimal("0"),
            total_change_percentage=0.0,
            number_of_changes=0,
            last_change_date=None,
            price_increases=0,
            price_decreases=0,
        )

    original_price = history[0].price
    total_change = current_price - original_price
    total_change_percentage = (
        float(total_change / original_price * 100) if original_price > 0 else 0.0
    )

    return PriceChangeSummary(
        current_price=current_price,
        original_price=original_price,
        total_change=total_change,
        total_change_percentage=total_change_percentage,
        # The first entry records the initial asking price
        number_of_changes=len(history) - 1,
        last_change_date=history[-1].date,
        price_increases=sum(1 for h in history if h.change_amount > 0),
        price_decreases=sum(1 for h in history if h.change_amount < 0),
    )


# ============================================================================
# Price levels
# ============================================================================


def average_price_per_unit(
    listings: Iterable[Listing],
    property_type: PropertyType | str | None = None,
    city: str | None = None,
    area_unit: str | None = None,
) -> PricePerUnit:
    """Mean and median price per unit of area."""
    unit = area_unit or DEFAULT_AREA_UNIT
    candidates = [
        listing
        for listing in _filter(listings, property_type, city, area_unit)
        if listing.status in PRICED_STATUSES
    ]
    per_unit = _prices_per_unit(candidates)

    if not per_unit:
        return PricePerUnit(0, 0, 0, unit)

    return PricePerUnit(
        average_price_per_unit=_round(_mean(per_unit)),
        median_price_per_unit=_round(_median(per_unit)),
        sample_size=len(per_unit),
        unit=unit,
    )


def median_price_per_unit(
    listings: Iterable[Listing],
    property_type: PropertyType | str | None = None,
    city: str | None = None,
    area_unit: str | None = None,
) -> int:
    return average_price_per_unit(listings, property_type, city, area_unit).median_price_per_unit


def price_trends(
    listings: Iterable[Listing],
    months: int = 12,
    property_type: PropertyType | str | None = None,
    city: str | None = None,
    today: datetime | None = None,
) -> list[MonthlyPriceTrend]:
    """Monthly price statistics by listing creation month, oldest first."""
    cutoff = _months_ago(today or datetime.now(), months)
    candidates = [
        listing
        for listing in _filter(listings, property_type, city)
        if listing.created_at >= cutoff and listing.status in PRICED_STATUSES
    ]

    by_month: dict[str, list[Listing]] = {}
    for listing in candidates:
        by_month.setdefault(listing.created_at.strftime("%Y-%m"), []).append(listing)

    trends = []
    for month in sorted(by_month):
        group = by_month[month]
        prices = _prices(group)
        per_unit = _prices_per_unit(group)
        trends.append(
            MonthlyPriceTrend(
                month=month,
                average_price=_round(_mean(prices)) if prices else 0,
                median_price=_round(_median(prices)) if prices else 0,
                count=len(group),
                average_price_per_unit=_round(_mean(per_unit)) if per_unit else 0,
            )
        )
    return trends


def price_distribution(
    listings: Iterable[Listing],
    property_type: PropertyType | str | None = None,
    city: str | None = None,
) -> list[PriceBucket]:
    """Share of priced listings in each fixed PKR band; empty bands omitted."""
    prices = _prices(
        listing
        for listing in _filter(listings, property_type, city)
        if listing.status in PRICED_STATUSES
    )
    if not prices:
        return []

    buckets = []
    for label, low, high in PRICE_RANGES:
        count = sum(1 for p in prices if p >= low and (high is None or p < high))
        if count == 0:
            continue
        buckets.append(
            PriceBucket(
                range=label,
                count=count,
                percentage=_round2(Decimal(count) / Decimal(len(prices)) * 100),
                min_price=low,
                max_price=high,
            )
        )
    return buckets


# ============================================================================
# Velocity and direction
# ============================================================================


def market_velocity(
    listings: Iterable[Listing],
    property_type: PropertyType | str | None = None,
    city: str | None = None,
    today: datetime | None = None,
) -> MarketVelocity:
    """How fast matching listings sell.

    ``inventory_turnover`` is the percentage of matching listings that sold;
    ``absorption_rate`` is sales per month over the trailing twelve months.
    """
    matching = _filter(listings, property_type, city)
    sold = [
        listing
        for listing in matching
        if listing.status == ListingStatus.SOLD and listing.sold_date is not None
    ]
    if not sold:
        return MarketVelocity(0, 0, 0.0, 0.0, 0)

    days_to_sell = [
        math.ceil(abs((listing.sold_date - (listing.listed_date or listing.created_at)).total_seconds()) / 86400)
        for listing in sold
    ]

    inventory_turnover = Decimal(len(sold)) / Decimal(len(matching)) * 100

    year_ago = _months_ago(today or datetime.now(), 12)
    recent_sales = sum(1 for listing in sold if listing.sold_date >= year_ago)

    return MarketVelocity(
        average_days_to_sell=_round(_mean(days_to_sell)),
        median_days_to_sell=_round(_median(days_to_sell)),
        inventory_turnover=_round2(inventory_turnover),
        absorption_rate=_round2(Decimal(recent_sales) / 12),
        sample_size=len(sold),
    )


def classify_trend(change_percentage: Decimal) -> tuple[Trend, TrendStrength]:
    """Direction at +/-5%, strength at 5% and 15% absolute change."""
    if change_percentage > TREND_THRESHOLD:
        trend = Trend.RISING
    elif change_percentage < -TREND_THRESHOLD:
        trend = Trend.FALLING
    else:
        trend = Trend.STABLE

    magnitude = abs(change_percentage)
    if magnitude > STRONG_TREND_THRESHOLD:
        strength = TrendStrength.STRONG
    elif magnitude > TREND_THRESHOLD:
        strength = TrendStrength.MODERATE
    else:
        strength = TrendStrength.WEAK
    return trend, strength


def market_trend_direction(
    listings: Iterable[Listing],
    months: int = 6,
    property_type: PropertyType | str | None = None,
    city: str | None = None,
    today: datetime | None = None,
) -> TrendDirection:
    """Compare the first and last monthly average price in the window."""
    trends = price_trends(listings, months, property_type, city, today)
    if len(trends) < 2:
        return TrendDirection(Trend.STABLE, 0.0, TrendStrength.WEAK)

    first = Decimal(trends[0].average_price)
    last = Decimal(trends[-1].average_price)
    change = (last - first) / first * 100 if first > 0 else Decimal("0")

    trend, strength = classify_trend(change)
    return TrendDirection(trend=trend, change_percentage=_round2(change), strength=strength)


# ============================================================================
# Summaries and recommendations
# ============================================================================


def market_statistics(
    listings: Sequence[Listing],
    property_type: PropertyType | str | None = None,
    city: str | None = None,
    today: datetime | None = None,
) -> MarketStatistics:
    """Headline numbers for a market segment."""
    matching = _filter(listings, property_type, city)
    prices = sorted(_prices(matching))

    average_price = _round(_mean(prices)) if prices else 0
    median_price = _round(_median(prices)) if prices else 0
    highest = _round(prices[-1]) if prices else 0
    lowest = _round(prices[0]) if prices else 0

    return MarketStatistics(
        total_listings=len(matching),
        active_listings=sum(
            1
            for listing in matching
            if listing.status == ListingStatus.AVAILABLE and listing.is_published
        ),
        sold_listings=sum(1 for listing in matching if listing.status == ListingStatus.SOLD),
        average_price=average_price,
        median_price=median_price,
        highest_price=highest,
        lowest_price=lowest,
        average_price_per_unit=average_price_per_unit(
            listings, property_type, city
        ).average_price_per_unit,
        market_velocity=market_velocity(listings, property_type, city, today),
        price_range=PriceRange(min=lowest, max=highest, spread=highest - lowest),
    )


def compare_to_market(
    listing: Listing,
    listings: Sequence[Listing],
    today: datetime | None = None,
) -> MarketComparison:
    """Position a listing against the average price of its type and city."""
    stats = market_statistics(listings, listing.property_type, listing.city, today)
    price = _price(listing)
    market_average = Decimal(stats.average_price)
    difference = price - market_average
    percentage = difference / market_average * 100 if market_average > 0 else Decimal("0")

    if percentage > MARKET_BAND:
        status = MarketPosition.ABOVE_MARKET
        recommendation = (
            "Property is priced above market average. "
            "Consider price reduction to increase interest."
        )
    elif percentage < -MARKET_BAND:
        status = MarketPosition.BELOW_MARKET
        recommendation = (
            "Property is priced below market average. You may be leaving money on the table."
        )
    else:
        status = MarketPosition.AT_MARKET
        recommendation = "Property is competitively priced at market average."

    return MarketComparison(
        market_average=stats.average_price,
        price_difference=_round(difference),
        percentage_difference=_round2(percentage),
        status=status,
        recommendation=recommendation,
    )


def pricing_recommendation(
    listing: Listing,
    listings: Sequence[Listing],
    today: datetime | None = None,
) -> PricingRecommendation:
    """Suggest an asking price from the segment's price per unit.

    Condition moves the estimate by 10%, market speed by 5%. Confidence
    depends on how many comparable listings priced the unit rate.
    """
    per_unit = average_price_per_unit(
        listings, listing.property_type, listing.city, listing.area_unit
    )
    velocity = market_velocity(listings, listing.property_type, listing.city, today)
    factors: list[str] = []

    suggested = Decimal(per_unit.average_price_per_unit) * Decimal(str(listing.area))

    if listing.condition == PropertyCondition.EXCELLENT:
        suggested *= Decimal("1.1")
        factors.append("Excellent condition (+10%)")
    elif listing.condition == PropertyCondition.NEEDS_WORK:
        suggested *= Decimal("0.9")
        factors.append("Needs work (-10%)")

    if velocity.average_days_to_sell < 30:
        suggested *= Decimal("1.05")
        factors.append("Hot market - fast sales (+5%)")
    elif velocity.average_days_to_sell > 180:
        suggested *= Decimal("0.95")
        factors.append("Slow market - price competitively (-5%)")

    if per_unit.sample_size >= 20:
        confidence = Confidence.HIGH
    elif per_unit.sample_size >= 10:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW
        factors.append("Limited market data - use with caution")

    return PricingRecommendation(
        suggested_price=_round(suggested),
        confidence=confidence,
        min_price=_round(suggested * Decimal("0.9")),
        max_price=_round(suggested * Decimal("1.1")),
        factors=factors,
    )
