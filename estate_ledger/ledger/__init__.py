"""Transaction ledger: persistence, categories and validation."""

from estate_ledger.ledger.categories import (
    category_for_type,
    category_label,
    type_label,
    types_for_category,
)
from estate_ledger.ledger.repository import TransactionRepository

__all__ = [
    "TransactionRepository",
    "category_for_type",
    "category_label",
    "type_label",
    "types_for_category",
]
