"""Fixed mapping of transaction types to categories, plus display labels."""

from estate_ledger.models.enums import TransactionCategory, TransactionType

T = TransactionType

TYPES_BY_CATEGORY: dict[TransactionCategory, tuple[TransactionType, ...]] = {
    TransactionCategory.ACQUISITION: (
        T.PURCHASE_PRICE,
        T.REGISTRATION_FEE,
        T.STAMP_DUTY,
        T.LEGAL_FEES,
        T.BROKER_COMMISSION,
        T.RENOVATION,
        T.OTHER_ACQUISITION,
    ),
    TransactionCategory.INCOME: (
        T.RENTAL_INCOME,
        T.PARKING_FEE,
        T.LATE_FEE,
        T.OTHER_INCOME,
    ),
    TransactionCategory.EXPENSE: (
        T.PROPERTY_TAX,
        T.MAINTENANCE,
        T.REPAIRS,
        T.UTILITIES,
        T.INSURANCE,
        T.MANAGEMENT_FEE,
        T.MARKETING,
        T.LEGAL_EXPENSE,
        T.OTHER_EXPENSE,
    ),
    TransactionCategory.SALE: (
        T.SALE_PRICE,
        T.SALE_COMMISSION,
        T.CLOSING_COSTS,
    ),
}

CATEGORY_BY_TYPE: dict[TransactionType, TransactionCategory] = {
    txn_type: category
    for category, txn_types in TYPES_BY_CATEGORY.items()
    for txn_type in txn_types
}

TYPE_LABELS: dict[TransactionType, str] = {
    T.PURCHASE_PRICE: "Purchase Price",
    T.REGISTRATION_FEE: "Registration Fee",
    T.STAMP_DUTY: "Stamp Duty",
    T.LEGAL_FEES: "Legal Fees",
    T.BROKER_COMMISSION: "Broker Commission",
    T.RENOVATION: "Renovation",
    T.OTHER_ACQUISITION: "Other Acquisition Cost",
    T.RENTAL_INCOME: "Rental Income",
    T.PARKING_FEE: "Parking Fee",
    T.LATE_FEE: "Late Fee",
    T.OTHER_INCOME: "Other Income",
    T.PROPERTY_TAX: "Property Tax",
    T.MAINTENANCE: "Maintenance",
    T.REPAIRS: "Repairs",
    T.UTILITIES: "Utilities",
    T.INSURANCE: "Insurance",
    T.MANAGEMENT_FEE: "Management Fee",
    T.MARKETING: "Marketing",
    T.LEGAL_EXPENSE: "Legal Expense",
    T.OTHER_EXPENSE: "Other Expense",
    T.SALE_PRICE: "Sale Price",
    T.SALE_COMMISSION: "Sale Commission",
    T.CLOSING_COSTS: "Closing Costs",
}

CATEGORY_LABELS: dict[TransactionCategory, str] = {
    TransactionCategory.ACQUISITION: "Acquisition",
    TransactionCategory.INCOME: "Income",
    TransactionCategory.EXPENSE: "Expense",
    TransactionCategory.SALE: "Sale",
}


def category_for_type(txn_type: TransactionType | str) -> TransactionCategory:
    """Return the category a transaction type belongs to.

    Raises
    ------
    ValueError
        If ``txn_type`` is not a known transaction type.
    """
    try:
        return CATEGORY_BY_TYPE[TransactionType(txn_type)]
    except ValueError:
        raise ValueError(f"Unknown transaction type: {txn_type}") from None


def types_for_category(category: TransactionCategory | str) -> tuple[TransactionType, ...]:
    return TYPES_BY_CATEGORY[TransactionCategory(category)]


def type_label(txn_type: TransactionType | str) -> str:
    try:
        return TYPE_LABELS[TransactionType(txn_type)]
    except ValueError:
        return str(txn_type)


def category_label(category: TransactionCategory | str) -> str:
    return CATEGORY_LABELS[TransactionCategory(category)]
