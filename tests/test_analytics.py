"""Tests for market analytics."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from estate_ledger.analytics import (
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
from estate_ledger.models import (
    Confidence,
    Listing,
    ListingStatus,
    MarketPosition,
    PriceHistoryEntry,
    PropertyCondition,
    PropertyType,
    Trend,
    TrendStrength,
)
from estate_ledger.store.serialization import listing_from_dict

TODAY = datetime(2025, 6, 30, 12, 0)

_counter = iter(range(1_000_000))


def _listing(
    price: str | int | None,
    area: float = 100.0,
    property_type: PropertyType = PropertyType.HOUSE,
    city: str = "Lahore",
    status: ListingStatus = ListingStatus.AVAILABLE,
    created_at: datetime = datetime(2025, 3, 1),
    sold_date: datetime | None = None,
    **kwargs,
) -> Listing:
    return Listing(
        listing_id=f"lst-{next(_counter)}",
        property_type=property_type,
        city=city,
        area=area,
        status=status,
        created_at=created_at,
        price=Decimal(str(price)) if price is not None else None,
        listed_date=created_at,
        sold_date=sold_date,
        **kwargs,
    )


def _sold(price: int, listed: datetime, days: int, **kwargs) -> Listing:
    return _listing(
        price,
        status=ListingStatus.SOLD,
        created_at=listed,
        sold_date=listed + timedelta(days=days),
        **kwargs,
    )


class TestPriceDistribution:
    """Tests for price_distribution."""

    def test_one_listing_per_band(self) -> None:
        """Each price lands in exactly one band and shares add up to 100."""
        prices = [1_000_000, 6_000_000, 15_000_000, 25_000_000, 60_000_000, 120_000_000]

        buckets = price_distribution([_listing(p) for p in prices])

        assert [b.range for b in buckets] == [
            "Under 5M",
            "5M - 10M",
            "10M - 20M",
            "20M - 50M",
            "50M - 100M",
            "Over 100M",
        ]
        assert sum(b.count for b in buckets) == 6
        assert sum(b.percentage for b in buckets) == pytest.approx(100, abs=0.1)
        assert buckets[-1].max_price is None

    def test_lower_bound_inclusive(self) -> None:
        buckets = price_distribution([_listing(5_000_000), _listing(4_999_999)])

        assert [(b.range, b.count) for b in buckets] == [("Under 5M", 1), ("5M - 10M", 1)]
        assert buckets[0].percentage == 50.0

    def test_unpriced_and_rented_ignored(self) -> None:
        listings = [
            _listing(None),
            _listing(0),
            _listing(3_000_000, status=ListingStatus.RENTED),
            _listing(3_000_000, status=ListingStatus.OFF_MARKET),
        ]

        assert price_distribution(listings) == []

    def test_filters(self) -> None:
        listings = [
            _listing(1_000_000, city="lahore"),
            _listing(1_000_000, city="Karachi"),
            _listing(1_000_000, property_type=PropertyType.LAND),
        ]

        buckets = price_distribution(listings, PropertyType.HOUSE, "LAHORE")

        assert buckets[0].count == 1


class TestPricePerUnit:
    """Tests for price per unit statistics."""

    def test_odd_sample(self) -> None:
        listings = [_listing(1000, area=100), _listing(2000, area=100), _listing(4000, area=100)]

        result = average_price_per_unit(listings)

        assert result.average_price_per_unit == 23
        assert result.median_price_per_unit == 20
        assert result.sample_size == 3
        assert result.unit == "sq-yards"

    def test_even_sample_rounds_half_up(self) -> None:
        listings = [_listing(p, area=100) for p in (1000, 2000, 4000, 6000)]

        result = average_price_per_unit(listings)

        assert result.median_price_per_unit == 30
        # Mean of 10, 20, 40, 60 is 32.5
        assert result.average_price_per_unit == 33
        assert median_price_per_unit(listings) == 30

    def test_zero_area_skipped(self) -> None:
        result = average_price_per_unit([_listing(1000, area=0), _listing(1000, area=10)])

        assert result.sample_size == 1
        assert result.average_price_per_unit == 100

    def test_area_unit_filter(self) -> None:
        listings = [_listing(1000, area=10), _listing(1000, area=10, area_unit="sq-feet")]

        result = average_price_per_unit(listings, area_unit="sq-feet")

        assert result.sample_size == 1
        assert result.unit == "sq-feet"

    def test_no_data(self) -> None:
        result = average_price_per_unit([])

        assert (result.average_price_per_unit, result.median_price_per_unit, result.sample_size) == (0, 0, 0)


class TestPriceTrends:
    """Tests for monthly price trends and trend direction."""

    def test_groups_by_creation_month(self) -> None:
        listings = [
            _listing(100, created_at=datetime(2025, 1, 10)),
            _listing(300, created_at=datetime(2025, 1, 20)),
            _listing(220, created_at=datetime(2025, 5, 5)),
            _listing(999, created_at=datetime(2023, 1, 1)),
        ]

        trends = price_trends(listings, months=12, today=TODAY)

        assert [t.month for t in trends] == ["2025-01", "2025-05"]
        assert trends[0].average_price == 200
        assert trends[0].median_price == 200
        assert trends[0].count == 2
        assert trends[0].average_price_per_unit == 2
        assert trends[1].average_price == 220

    @pytest.mark.parametrize(
        ("change", "trend", "strength"),
        [
            (Decimal("20"), Trend.RISING, TrendStrength.STRONG),
            (Decimal("10"), Trend.RISING, TrendStrength.MODERATE),
            (Decimal("5"), Trend.STABLE, TrendStrength.WEAK),
            (Decimal("-6"), Trend.FALLING, TrendStrength.MODERATE),
            (Decimal("-16"), Trend.FALLING, TrendStrength.STRONG),
        ],
    )
    def test_classify_trend(self, change: Decimal, trend: Trend, strength: TrendStrength) -> None:
        assert classify_trend(change) == (trend, strength)

    def test_rising_direction(self) -> None:
        """An average of 100 rising to 110 is a moderate 10% rise."""
        listings = [
            _listing(100, created_at=datetime(2025, 1, 15)),
            _listing(105, created_at=datetime(2025, 3, 15)),
            _listing(110, created_at=datetime(2025, 6, 15)),
        ]

        direction = market_trend_direction(listings, months=6, today=TODAY)

        assert direction.trend == Trend.RISING
        assert direction.change_percentage == 10.0
        assert direction.strength == TrendStrength.MODERATE

    def test_single_month_is_stable(self) -> None:
        direction = market_trend_direction([_listing(100, created_at=datetime(2025, 6, 1))], today=TODAY)

        assert direction.trend == Trend.STABLE
        assert direction.change_percentage == 0.0
        assert direction.strength == TrendStrength.WEAK


class TestMarketVelocity:
    """Tests for market_velocity."""

    def test_velocity(self) -> None:
        listings = [
            _sold(1_000_000, datetime(2025, 1, 1), 10),
            _sold(1_000_000, datetime(2025, 2, 1), 30),
            _listing(1_000_000),
            _listing(1_000_000),
        ]

        velocity = market_velocity(listings, today=TODAY)

        assert velocity.average_days_to_sell == 20
        assert velocity.median_days_to_sell == 20
        assert velocity.inventory_turnover == 50.0
        assert velocity.absorption_rate == 0.17
        assert velocity.sample_size == 2

    def test_type_and_city_filters_both_apply(self) -> None:
        listings = [
            _sold(1_000_000, datetime(2025, 1, 1), 10),
            _listing(1_000_000),
            _sold(1_000_000, datetime(2025, 1, 1), 100, city="Karachi"),
            _sold(1_000_000, datetime(2025, 1, 1), 100, property_type=PropertyType.APARTMENT),
        ]

        velocity = market_velocity(listings, PropertyType.HOUSE, "Lahore", today=TODAY)

        assert velocity.sample_size == 1
        assert velocity.average_days_to_sell == 10
        assert velocity.inventory_turnover == 50.0

    def test_old_sales_excluded_from_absorption(self) -> None:
        listings = [_sold(1_000_000, datetime(2023, 1, 1), 30)]

        velocity = market_velocity(listings, today=TODAY)

        assert velocity.sample_size == 1
        assert velocity.absorption_rate == 0.0

    def test_no_sales(self) -> None:
        velocity = market_velocity([_listing(1_000_000)], today=TODAY)

        assert velocity.sample_size == 0
        assert velocity.average_days_to_sell == 0
        assert velocity.inventory_turnover == 0.0


class TestMarketStatistics:
    """Tests for market_statistics."""

    def test_statistics(self) -> None:
        listings = [
            _listing(1_000_000),
            _listing(3_000_000, is_published=False),
            _sold(2_000_000, datetime(2025, 1, 1), 20),
            _listing(None, status=ListingStatus.OFF_MARKET),
        ]

        stats = market_statistics(listings, today=TODAY)

        assert stats.total_listings == 4
        assert stats.active_listings == 1
        assert stats.sold_listings == 1
        assert stats.average_price == 2_000_000
        assert stats.median_price == 2_000_000
        assert stats.highest_price == 3_000_000
        assert stats.lowest_price == 1_000_000
        assert stats.price_range.spread == 2_000_000
        assert stats.market_velocity.sample_size == 1

    def test_empty(self) -> None:
        stats = market_statistics([], today=TODAY)

        assert stats.total_listings == 0
        assert stats.average_price == 0
        assert stats.price_range.spread == 0


class TestComparisonsAndRecommendations:
    """Tests for compare_to_market and pricing_recommendation."""

    @pytest.fixture
    def segment(self) -> list[Listing]:
        return [_listing(1_000_000), _listing(1_000_000), _listing(1_000_000)]

    @pytest.mark.parametrize(
        ("price", "status", "difference"),
        [
            (1_200_000, MarketPosition.ABOVE_MARKET, 20.0),
            (950_000, MarketPosition.AT_MARKET, -5.0),
            (1_100_000, MarketPosition.AT_MARKET, 10.0),
            (800_000, MarketPosition.BELOW_MARKET, -20.0),
        ],
    )
    def test_compare_to_market(
        self, segment: list[Listing], price: int, status: MarketPosition, difference: float
    ) -> None:
        comparison = compare_to_market(_listing(price), segment, today=TODAY)

        assert comparison.market_average == 1_000_000
        assert comparison.price_difference == price - 1_000_000
        assert comparison.percentage_difference == difference
        assert comparison.status == status
        assert comparison.recommendation

    def test_compare_with_no_market(self) -> None:
        comparison = compare_to_market(_listing(500_000, city="Quetta"), [], today=TODAY)

        assert comparison.market_average == 0
        assert comparison.percentage_difference == 0.0
        assert comparison.status == MarketPosition.AT_MARKET

    def test_recommendation_excellent_condition(self) -> None:
        comparables = [_sold(1_000_000, datetime(2025, 1, 1), 60) for _ in range(10)]
        subject = _listing(None, area=200, condition=PropertyCondition.EXCELLENT)

        rec = pricing_recommendation(subject, comparables, today=TODAY)

        assert rec.suggested_price == 2_200_000
        assert rec.min_price == 1_980_000
        assert rec.max_price == 2_420_000
        assert rec.confidence == Confidence.MEDIUM
        assert rec.factors == ["Excellent condition (+10%)"]

    def test_recommendation_slow_market_little_data(self) -> None:
        comparables = [_sold(1_000_000, datetime(2024, 6, 1), 200) for _ in range(3)]
        subject = _listing(None, area=100, condition=PropertyCondition.NEEDS_WORK)

        rec = pricing_recommendation(subject, comparables, today=TODAY)

        assert rec.suggested_price == 855_000
        assert rec.confidence == Confidence.LOW
        assert rec.factors == [
            "Needs work (-10%)",
            "Slow market - price competitively (-5%)",
            "Limited market data - use with caution",
        ]

    def test_recommendation_high_confidence_hot_market(self) -> None:
        comparables = [_sold(1_000_000, datetime(2025, 5, 1), 7) for _ in range(20)]

        rec = pricing_recommendation(_listing(None, area=100), comparables, today=TODAY)

        assert rec.confidence == Confidence.HIGH
        assert rec.suggested_price == 1_050_000
        assert rec.factors == ["Hot market - fast sales (+5%)"]


class TestPriceHistory:
    """Tests for listing price history helpers."""

    def test_add_price_history(self) -> None:
        listing = _listing(1_000_000)

        entry = add_price_history(listing, Decimal("900000"), reason="Slow interest", now=TODAY)

        assert entry.change_amount == Decimal("-100000")
        assert entry.change_percentage == -10.0
        assert entry.date == TODAY
        assert listing.price == Decimal("1000000")

    def test_first_price_has_no_percentage(self) -> None:
        entry = add_price_history(_listing(None), Decimal("500000"), now=TODAY)

        assert entry.change_amount == Decimal("500000")
        assert entry.change_percentage == 0.0

    def test_change_summary(self) -> None:
        listing = _listing(1_000_000)
        listing.price_history.append(
            PriceHistoryEntry(Decimal("1000000"), datetime(2025, 1, 1), Decimal("0"), 0.0, "Listed")
        )
        listing.price_history.append(add_price_history(listing, Decimal("900000"), now=datetime(2025, 2, 1)))
        listing.price = Decimal("900000")

        summary = price_change_summary(listing)

        assert summary.original_price == Decimal("1000000")
        assert summary.current_price == Decimal("900000")
        assert summary.total_change == Decimal("-100000")
        assert summary.total_change_percentage == -10.0
        assert summary.number_of_changes == 1
        assert summary.last_change_date == datetime(2025, 2, 1)
        assert summary.price_increases == 0
        assert summary.price_decreases == 1

    def test_summary_without_history(self) -> None:
        summary = price_change_summary(_listing(750_000))

        assert summary.number_of_changes == 0
        assert summary.total_change == Decimal("0")
        assert summary.last_change_date is None


class TestStoredListings:
    """Analytics over listings decoded from stored records."""

    @staticmethod
    def _stored(created_at: str, sold_date: str | None = None, price: str = "1000000") -> Listing:
        record = {
            "listing_id": f"lst-{next(_counter)}",
            "property_type": "house",
            "city": "Lahore",
            "area": 100,
            "status": "sold" if sold_date else "available",
            "created_at": created_at,
            "listed_date": created_at,
            "sold_date": sold_date,
            "price": price,
        }
        return listing_from_dict(record)

    def test_trends_on_utc_timestamps(self) -> None:
        listings = [
            self._stored("2025-01-15T00:00:00.000Z", price="100"),
            self._stored("2025-05-01T00:00:00.000Z", price="110"),
        ]

        trends = price_trends(listings, months=12, today=TODAY)
        direction = market_trend_direction(listings, months=6, today=TODAY)

        assert [t.month for t in trends] == ["2025-01", "2025-05"]
        assert direction.trend == Trend.RISING
        assert direction.change_percentage == 10.0

    def test_velocity_on_utc_timestamps(self) -> None:
        listings = [
            self._stored("2025-05-01T00:00:00.000Z", sold_date="2025-05-21T00:00:00.000Z"),
            self._stored("2025-05-01T00:00:00.000Z"),
        ]

        velocity = market_velocity(listings, today=TODAY)

        assert velocity.average_days_to_sell == 20
        assert velocity.inventory_turnover == 50.0
        assert velocity.sample_size == 1

    def test_defaults_to_current_clock(self) -> None:
        created = (datetime.now() - timedelta(days=10)).strftime("%Y-%m-%dT%H:%M:%S.000Z")

        trends = price_trends([self._stored(created)])

        assert len(trends) == 1
