"""Generate synthetic property listings."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterator

from estate_ledger.generators.base import BaseGenerator
from estate_ledger.models.enums import ListingStatus, PropertyCondition, PropertyType
from estate_ledger.models.listing import Listing

CITIES = ("Karachi", "Lahore", "Islamabad", "Rawalpindi", "Faisalabad")

# Price per square yard ranges in PKR
PRICE_PER_UNIT = {
    PropertyType.HOUSE: (60_000, 250_000),
    PropertyType.APARTMENT: (80_000, 300_000),
    PropertyType.COMMERCIAL: (150_000, 600_000),
    PropertyType.LAND: (20_000, 150_000),
}

AREA_RANGES = {
    PropertyType.HOUSE: (120, 1000),
    PropertyType.APARTMENT: (60, 300),
    PropertyType.COMMERCIAL: (100, 800),
    PropertyType.LAND: (200, 4000),
}


class ListingGenerator(BaseGenerator):
    """Generate listings spread over a trailing window of months."""

    def generate(self, now: datetime | None = None, months_back: int = 12) -> Listing:
        """Generate a listing created within ``months_back`` months of ``now``.

        Roughly a third of listings are sold, 10-240 days after listing.
        """
        now = now or datetime.now()
        property_type = self.rng.choice(list(PropertyType))
        low_area, high_area = AREA_RANGES[property_type]
        area = float(self.rng.randint(low_area, high_area))
        low_rate, high_rate = PRICE_PER_UNIT[property_type]
        price = Decimal(self.rng.randint(low_rate, high_rate)) * Decimal(str(area))
        # Asking prices are quoted to the nearest thousand
        price = (price / 1000).quantize(Decimal("1")) * 1000

        created_at = now - timedelta(days=self.rng.randint(0, months_back * 30))
        status = ListingStatus.AVAILABLE
        sold_date = None
        if self.rng.random() < 0.35:
            candidate = created_at + timedelta(days=self.rng.randint(10, 240))
            if candidate <= now:
                status = ListingStatus.SOLD
                sold_date = candidate

        return Listing(
            listing_id=self.fake.uuid4(),
            property_type=property_type,
            city=self.rng.choice(CITIES),
            area=area,
            status=status,
            created_at=created_at,
            price=price,
            is_published=self.rng.random() < 0.9,
            condition=self.rng.choice(list(PropertyCondition)),
            listed_date=created_at,
            sold_date=sold_date,
        )

    def generate_batch(self, count: int, now: datetime | None = None) -> Iterator[Listing]:
        """Generate ``count`` listings."""
        for _ in range(count):
            yield self.generate(now)
