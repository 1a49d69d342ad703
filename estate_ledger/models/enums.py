"""Enumeration types for ledger and listing entities."""

from enum import Enum


class TransactionCategory(str, Enum):
    ACQUISITION = "acquisition"
    INCOME = "income"
    EXPENSE = "expense"
    SALE = "sale"


class TransactionType(str, Enum):
    # Acquisition
    PURCHASE_PRICE = "purchase_price"
    REGISTRATION_FEE = "registration_fee"
    STAMP_DUTY = "stamp_duty"
    LEGAL_FEES = "legal_fees"
    BROKER_COMMISSION = "broker_commission"
    RENOVATION = "renovation"
    OTHER_ACQUISITION = "other_acquisition"

    # Income
    RENTAL_INCOME = "rental_income"
    PARKING_FEE = "parking_fee"
    LATE_FEE = "late_fee"
    OTHER_INCOME = "other_income"

    # Expense
    PROPERTY_TAX = "property_tax"
    MAINTENANCE = "maintenance"
    REPAIRS = "repairs"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    MANAGEMENT_FEE = "management_fee"
    MARKETING = "marketing"
    LEGAL_EXPENSE = "legal_expense"
    OTHER_EXPENSE = "other_expense"

    # Sale
    SALE_PRICE = "sale_price"
    SALE_COMMISSION = "sale_commission"
    CLOSING_COSTS = "closing_costs"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank-transfer"
    CHEQUE = "cheque"
    ONLINE = "online"


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"


class PropertyType(str, Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    COMMERCIAL = "commercial"
    LAND = "land"


class ListingStatus(str, Enum):
    AVAILABLE = "available"
    SOLD = "sold"
    RENTED = "rented"
    OFF_MARKET = "off-market"


class PropertyCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_WORK = "needs-work"


class Trend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class TrendStrength(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class MarketPosition(str, Enum):
    ABOVE_MARKET = "above-market"
    AT_MARKET = "at-market"
    BELOW_MARKET = "below-market"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
