"""Domain models for the agency ledger and market analytics."""

from estate_ledger.models.base import Event
from estate_ledger.models.enums import (
    Confidence,
    ListingStatus,
    MarketPosition,
    PaymentMethod,
    PropertyCondition,
    PropertyStatus,
    PropertyType,
    TransactionCategory,
    TransactionType,
    Trend,
    TrendStrength,
)
from estate_ledger.models.financials import (
    AcquisitionBreakdown,
    ExpenseBreakdown,
    IncomeBreakdown,
    OperatingPeriod,
    PortfolioFinancials,
    PortfolioProperty,
    ProfitBreakdown,
    ProfitLossStatement,
    PropertyFinancials,
    PropertyHighlight,
    SaleBreakdown,
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
from estate_ledger.models.transaction import Transaction

__all__ = [
    "AcquisitionBreakdown",
    "Confidence",
    "Event",
    "ExpenseBreakdown",
    "IncomeBreakdown",
    "Listing",
    "ListingStatus",
    "MarketComparison",
    "MarketPosition",
    "MarketStatistics",
    "MarketVelocity",
    "MonthlyPriceTrend",
    "OperatingPeriod",
    "PaymentMethod",
    "PortfolioFinancials",
    "PortfolioProperty",
    "PriceBucket",
    "PriceChangeSummary",
    "PriceHistoryEntry",
    "PricePerUnit",
    "PriceRange",
    "PricingRecommendation",
    "ProfitBreakdown",
    "ProfitLossStatement",
    "PropertyCondition",
    "PropertyFinancials",
    "PropertyHighlight",
    "PropertyStatus",
    "PropertyType",
    "SaleBreakdown",
    "Transaction",
    "TransactionCategory",
    "TransactionType",
    "Trend",
    "TrendDirection",
    "TrendStrength",
]
