"""Domain invariants enforced on every ledger write."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from estate_ledger.exceptions import TransactionValidationError
from estate_ledger.ledger.categories import category_for_type
from estate_ledger.models.enums import TransactionCategory, TransactionType

REQUIRED_FIELDS = ("property_id", "description", "recorded_by")


def validate_amount(amount: Any) -> Decimal:
    """Coerce ``amount`` to Decimal and check it is finite and non-negative."""
    if isinstance(amount, bool):
        raise TransactionValidationError(f"Invalid amount: {amount!r}")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise TransactionValidationError(f"Invalid amount: {amount!r}") from None

    if not value.is_finite():
        raise TransactionValidationError(f"Amount must be finite, got {amount!r}")
    if value < 0:
        raise TransactionValidationError(f"Amount must not be negative, got {amount!r}")
    return value


def validate_date(value: Any, today: date) -> date:
    """Parse a transaction date and reject dates after ``today``."""
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = date.fromisoformat(value[:10])
        except ValueError:
            raise TransactionValidationError(f"Invalid date: {value!r}") from None
    else:
        raise TransactionValidationError(f"Invalid date: {value!r}")

    if parsed > today:
        raise TransactionValidationError(f"Date {parsed.isoformat()} is in the future")
    return parsed


def resolve_category(
    txn_type: Any, category: Any = None
) -> tuple[TransactionType, TransactionCategory]:
    """Return the (type, category) pair, deriving the category from the type.

    A supplied category that disagrees with the fixed mapping is rejected.
    """
    try:
        resolved_type = TransactionType(txn_type)
    except ValueError:
        raise TransactionValidationError(f"Unknown transaction type: {txn_type!r}") from None

    expected = category_for_type(resolved_type)
    if category is not None and category != "":
        try:
            supplied = TransactionCategory(category)
        except ValueError:
            raise TransactionValidationError(f"Unknown category: {category!r}") from None
        if supplied != expected:
            raise TransactionValidationError(
                f"Type {resolved_type.value} belongs to {expected.value}, not {supplied.value}"
            )
    return resolved_type, expected


def validate_required(fields: dict[str, Any]) -> None:
    missing = [name for name in REQUIRED_FIELDS if not str(fields.get(name) or "").strip()]
    if missing:
        raise TransactionValidationError(f"Missing required fields: {', '.join(missing)}")
