"""JSON-compatible encoding and decoding of stored records."""

from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from estate_ledger.models.enums import (
    ListingStatus,
    PaymentMethod,
    PropertyCondition,
    PropertyType,
    TransactionCategory,
    TransactionType,
)
from estate_ledger.models.listing import Listing, PriceHistoryEntry
from estate_ledger.models.transaction import Transaction


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def to_dict_fast(obj: Any) -> dict:
    """Convert a flat dataclass without the deep copy done by ``asdict``.

    Only safe for dataclasses without nested dataclass fields, such as
    :class:`Transaction`.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def parse_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from expanding to their binary repr
    return Decimal(str(value))


def parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_datetime(value: Any) -> datetime | None:
    """Parse a timestamp as a naive datetime.

    Offset-aware values (such as ISO strings ending in ``Z``) are converted
    to UTC and stripped of their offset, so every decoded timestamp compares
    with the naive clock used across the package.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _enum_or_none(enum_cls: type[Enum], value: Any) -> Any:
    if value is None or value == "":
        return None
    return enum_cls(value)


def transaction_to_dict(transaction: Transaction) -> dict:
    """Encode a transaction for storage."""
    return to_dict_fast(transaction)


def transaction_from_dict(data: dict) -> Transaction:
    """Decode a stored transaction record."""
    return Transaction(
        transaction_id=data["transaction_id"],
        property_id=data["property_id"],
        property_address=data.get("property_address", ""),
        category=TransactionCategory(data["category"]),
        transaction_type=TransactionType(data["transaction_type"]),
        amount=parse_decimal(data["amount"]),
        date=parse_date(data["date"]),
        description=data.get("description", ""),
        recorded_by=data.get("recorded_by", ""),
        recorded_by_name=data.get("recorded_by_name", ""),
        notes=data.get("notes"),
        receipt_number=data.get("receipt_number"),
        receipt_url=data.get("receipt_url"),
        payment_method=_enum_or_none(PaymentMethod, data.get("payment_method")),
        payment_reference=data.get("payment_reference"),
        purchase_cycle_id=data.get("purchase_cycle_id"),
        sell_cycle_id=data.get("sell_cycle_id"),
        deal_id=data.get("deal_id"),
        created_at=parse_datetime(data.get("created_at")),
        updated_at=parse_datetime(data.get("updated_at")),
    )


def listing_to_dict(listing: Listing) -> dict:
    """Encode a listing, including its nested price history."""
    return dataclass_to_dict(listing)


def listing_from_dict(data: dict) -> Listing:
    """Decode a stored listing record."""
    history = [
        PriceHistoryEntry(
            price=parse_decimal(entry["price"]),
            date=parse_datetime(entry["date"]),
            change_amount=parse_decimal(entry.get("change_amount", "0")),
            change_percentage=float(entry.get("change_percentage", 0)),
            reason=entry.get("reason"),
            changed_by=entry.get("changed_by"),
        )
        for entry in data.get("price_history") or []
    ]
    return Listing(
        listing_id=data["listing_id"],
        property_type=PropertyType(data["property_type"]),
        city=data.get("city", ""),
        area=float(data.get("area") or 0),
        status=ListingStatus(data["status"]),
        created_at=parse_datetime(data["created_at"]),
        price=parse_decimal(data.get("price")),
        area_unit=data.get("area_unit") or "sq-yards",
        is_published=bool(data.get("is_published", True)),
        condition=_enum_or_none(PropertyCondition, data.get("condition")),
        listed_date=parse_datetime(data.get("listed_date")),
        sold_date=parse_datetime(data.get("sold_date")),
        price_history=history,
    )
