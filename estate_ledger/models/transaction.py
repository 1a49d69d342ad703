"""Ledger transaction model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import (
    PaymentMethod,
    TransactionCategory,
    TransactionType,
)


@dataclass
class Transaction:
    """Financial record against an agency-owned property."""

    transaction_id: str
    property_id: str
    property_address: str
    category: TransactionCategory
    transaction_type: TransactionType
    amount: Decimal
    date: date
    description: str
    recorded_by: str
    recorded_by_name: str = ""
    notes: str | None = None

    # Receipt and payment details (optional)
    receipt_number: str | None = None
    receipt_url: str | None = None
    payment_method: PaymentMethod | None = None
    payment_reference: str | None = None

    # Links to the deal workflow that produced the record (optional)
    purchase_cycle_id: str | None = None
    sell_cycle_id: str | None = None
    deal_id: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None
