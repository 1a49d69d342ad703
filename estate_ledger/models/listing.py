"""Property listing model used by market analytics."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from estate_ledger.models.enums import ListingStatus, PropertyCondition, PropertyType


@dataclass
class PriceHistoryEntry:
    """A single asking-price change on a listing."""

    price: Decimal
    date: datetime
    change_amount: Decimal
    change_percentage: float
    reason: str | None = None
    changed_by: str | None = None


@dataclass
class Listing:
    """Snapshot of a property listing."""

    listing_id: str
    property_type: PropertyType
    city: str
    area: float
    status: ListingStatus
    created_at: datetime
    price: Decimal | None = None
    area_unit: str = "sq-yards"
    is_published: bool = True
    condition: PropertyCondition | None = None
    listed_date: datetime | None = None
    sold_date: datetime | None = None
    price_history: list[PriceHistoryEntry] = field(default_factory=list)
