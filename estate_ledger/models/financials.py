"""Derived financial results. Computed on read, never persisted."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import PropertyStatus

ZERO = Decimal("0")


@dataclass
class AcquisitionBreakdown:
    registration_fee: Decimal = ZERO
    stamp_duty: Decimal = ZERO
    legal_fees: Decimal = ZERO
    broker_commission: Decimal = ZERO
    renovation: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return (
            self.registration_fee
            + self.stamp_duty
            + self.legal_fees
            + self.broker_commission
            + self.renovation
            + self.other
        )


@dataclass
class IncomeBreakdown:
    rental_income: Decimal = ZERO
    parking_fee: Decimal = ZERO
    late_fee: Decimal = ZERO
    other_income: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.rental_income + self.parking_fee + self.late_fee + self.other_income


@dataclass
class ExpenseBreakdown:
    property_tax: Decimal = ZERO
    maintenance: Decimal = ZERO
    repairs: Decimal = ZERO
    utilities: Decimal = ZERO
    insurance: Decimal = ZERO
    management_fee: Decimal = ZERO
    marketing: Decimal = ZERO
    legal_expense: Decimal = ZERO
    other_expense: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return (
            self.property_tax
            + self.maintenance
            + self.repairs
            + self.utilities
            + self.insurance
            + self.management_fee
            + self.marketing
            + self.legal_expense
            + self.other_expense
        )


@dataclass
class SaleBreakdown:
    sale_commission: Decimal = ZERO
    closing_costs: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.sale_commission + self.closing_costs


@dataclass
class PropertyFinancials:
    """Financial snapshot of a single property.

    Sale fields stay ``None`` while the property is active. ``roi`` and
    ``annualized_roi`` are ``0`` for a sold property with no acquisition cost.
    """

    property_id: str
    property_address: str
    acquisition_date: date

    purchase_price: Decimal
    acquisition_expenses: Decimal
    total_acquisition_cost: Decimal
    acquisition_breakdown: AcquisitionBreakdown

    total_income: Decimal
    total_expenses: Decimal
    net_cash_flow: Decimal
    operating_profit: Decimal
    income_breakdown: IncomeBreakdown
    expense_breakdown: ExpenseBreakdown

    status: PropertyStatus
    transaction_count: int
    calculated_at: datetime
    current_value: Decimal | None = None

    sale_date: date | None = None
    sale_price: Decimal | None = None
    sale_expenses: Decimal | None = None
    sale_breakdown: SaleBreakdown | None = None
    net_sale_proceeds: Decimal | None = None
    capital_gain: Decimal | None = None
    total_profit: Decimal | None = None
    roi: Decimal | None = None
    annualized_roi: Decimal | None = None
    holding_period: int | None = None
    holding_period_years: Decimal | None = None


@dataclass
class PortfolioProperty:
    """Input row for portfolio calculations."""

    property_id: str
    address: str
    acquisition_date: date
    current_value: Decimal
    status: PropertyStatus = PropertyStatus.ACTIVE
    sale_date: date | None = None


@dataclass
class PropertyHighlight:
    property_id: str
    address: str
    value: Decimal


@dataclass
class PortfolioFinancials:
    """Portfolio-wide totals across agency-owned properties."""

    total_properties: int
    active_properties: int
    sold_properties: int
    total_invested: Decimal
    current_portfolio_value: Decimal
    total_income: Decimal
    total_expenses: Decimal
    net_cash_flow: Decimal
    income_ytd: Decimal
    expenses_ytd: Decimal
    net_cash_flow_ytd: Decimal
    total_realized_profit: Decimal
    total_realized_roi: Decimal
    average_holding_period: Decimal
    unrealized_profit: Decimal
    portfolio_roi: Decimal
    calculated_at: datetime
    best_roi_property: PropertyHighlight | None = None
    best_cash_flow_property: PropertyHighlight | None = None


@dataclass
class OperatingPeriod:
    start: date
    end: date
    days: int
    years: Decimal


@dataclass
class ProfitBreakdown:
    """Split of total profit between capital gain and operations.

    The share percentages are ``None`` when total profit is zero, since no
    split exists in that case.
    """

    from_capital_gain: Decimal
    from_operations: Decimal
    capital_gain_share: Decimal | None
    operations_share: Decimal | None


@dataclass
class ProfitLossStatement:
    """Profit and loss statement for a sold property."""

    property_id: str
    property_address: str
    acquisition_date: date
    sale_date: date
    purchase_price: Decimal
    acquisition_breakdown: AcquisitionBreakdown
    total_acquisition_cost: Decimal
    operating_period: OperatingPeriod
    total_income: Decimal
    total_expenses: Decimal
    operating_profit: Decimal
    sale_price: Decimal
    sale_expenses: Decimal
    net_sale_proceeds: Decimal
    capital_gain: Decimal
    total_profit: Decimal
    total_roi: Decimal
    annualized_roi: Decimal
    profit_breakdown: ProfitBreakdown
    generated_at: datetime
    generated_by: str
