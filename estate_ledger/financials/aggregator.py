"""Financial calculations and P&L analysis for agency-owned properties.

All functions are pure reads over a :class:`TransactionRepository`; nothing
computed here is stored.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from estate_ledger.ledger.repository import TransactionRepository
from estate_ledger.models.enums import PropertyStatus, TransactionCategory
from estate_ledger.models.enums import TransactionType as T
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

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DAYS_PER_YEAR = Decimal("365")


# ============================================================================
# Ratio helpers
# ============================================================================


def calculate_roi(profit: Decimal, investment: Decimal) -> Decimal:
    """Profit as a percentage of investment; 0 when there is no investment."""
    if investment == 0:
        return ZERO
    return profit / investment * HUNDRED


def calculate_annualized_roi(roi: Decimal, years: Decimal) -> Decimal:
    """Spread ``roi`` over ``years``; an empty period leaves it unchanged."""
    if years <= 0:
        return roi
    return roi / years


def calculate_holding_period(start: date, end: date) -> int:
    """Whole days between ``start`` and ``end``."""
    return (_as_date(end) - _as_date(start)).days


def calculate_holding_period_years(start: date, end: date) -> Decimal:
    return Decimal(calculate_holding_period(start, end)) / DAYS_PER_YEAR


def share_of(part: Decimal, total: Decimal) -> Decimal | None:
    """``part`` as a percentage of ``total``, or ``None`` if ``total`` is zero."""
    if total == 0:
        return None
    return part / total * HUNDRED


# ============================================================================
# Breakdowns
# ============================================================================


def _acquisition_breakdown(totals: dict[T, Decimal]) -> AcquisitionBreakdown:
    return AcquisitionBreakdown(
        registration_fee=totals.get(T.REGISTRATION_FEE, ZERO),
        stamp_duty=totals.get(T.STAMP_DUTY, ZERO),
        legal_fees=totals.get(T.LEGAL_FEES, ZERO),
        broker_commission=totals.get(T.BROKER_COMMISSION, ZERO),
        renovation=totals.get(T.RENOVATION, ZERO),
        other=totals.get(T.OTHER_ACQUISITION, ZERO),
    )


def _income_breakdown(totals: dict[T, Decimal]) -> IncomeBreakdown:
    return IncomeBreakdown(
        rental_income=totals.get(T.RENTAL_INCOME, ZERO),
        parking_fee=totals.get(T.PARKING_FEE, ZERO),
        late_fee=totals.get(T.LATE_FEE, ZERO),
        other_income=totals.get(T.OTHER_INCOME, ZERO),
    )


def _expense_breakdown(totals: dict[T, Decimal]) -> ExpenseBreakdown:
    return ExpenseBreakdown(
        property_tax=totals.get(T.PROPERTY_TAX, ZERO),
        maintenance=totals.get(T.MAINTENANCE, ZERO),
        repairs=totals.get(T.REPAIRS, ZERO),
        utilities=totals.get(T.UTILITIES, ZERO),
        insurance=totals.get(T.INSURANCE, ZERO),
        management_fee=totals.get(T.MANAGEMENT_FEE, ZERO),
        marketing=totals.get(T.MARKETING, ZERO),
        legal_expense=totals.get(T.LEGAL_EXPENSE, ZERO),
        other_expense=totals.get(T.OTHER_EXPENSE, ZERO),
    )


def _sale_breakdown(totals: dict[T, Decimal]) -> SaleBreakdown:
    return SaleBreakdown(
        sale_commission=totals.get(T.SALE_COMMISSION, ZERO),
        closing_costs=totals.get(T.CLOSING_COSTS, ZERO),
    )


# ============================================================================
# Property level
# ============================================================================


def calculate_property_financials(
    repo: TransactionRepository,
    property_id: str,
    property_address: str,
    acquisition_date: date | str,
    current_value: Decimal | None = None,
    sale_date: date | str | None = None,
) -> PropertyFinancials:
    """Calculate the complete financial summary of a property.

    A property counts as sold when ``sale_date`` is given; the sale,
    profit, ROI and holding-period fields are only filled in that case.

    Parameters
    ----------
    repo : TransactionRepository
        Ledger holding the property's transactions.
    property_id : str
        Property to summarize.
    property_address : str
        Display address, copied into the result.
    acquisition_date : date | str
        Date the agency acquired the property.
    current_value : Decimal | None
        Latest valuation estimate, copied into the result.
    sale_date : date | str | None
        Date the property was sold, if it was.

    Returns
    -------
    PropertyFinancials
        Snapshot consistent with the ledger at call time.
    """
    acquired_on = _as_date(acquisition_date)
    totals = repo.totals_by_type(property_id)
    transaction_count = repo.count(property_id)

    purchase_price = totals.get(T.PURCHASE_PRICE, ZERO)
    acquisition = _acquisition_breakdown(totals)
    acquisition_expenses = acquisition.total
    total_acquisition_cost = purchase_price + acquisition_expenses

    income = _income_breakdown(totals)
    expenses = _expense_breakdown(totals)
    total_income = income.total
    total_expenses = expenses.total
    net_cash_flow = total_income - total_expenses
    operating_profit = net_cash_flow

    financials = PropertyFinancials(
        property_id=property_id,
        property_address=property_address,
        acquisition_date=acquired_on,
        purchase_price=purchase_price,
        acquisition_expenses=acquisition_expenses,
        total_acquisition_cost=total_acquisition_cost,
        acquisition_breakdown=acquisition,
        total_income=total_income,
        total_expenses=total_expenses,
        net_cash_flow=net_cash_flow,
        operating_profit=operating_profit,
        income_breakdown=income,
        expense_breakdown=expenses,
        status=PropertyStatus.ACTIVE,
        transaction_count=transaction_count,
        calculated_at=repo.clock(),
        current_value=current_value,
    )

    if sale_date is None:
        return financials

    sold_on = _as_date(sale_date)
    sale = _sale_breakdown(totals)
    sale_price = totals.get(T.SALE_PRICE, ZERO)
    sale_expenses = sale.total
    net_sale_proceeds = sale_price - sale_expenses
    capital_gain = net_sale_proceeds - total_acquisition_cost
    total_profit = capital_gain + operating_profit

    holding_period = calculate_holding_period(acquired_on, sold_on)
    holding_period_years = Decimal(holding_period) / DAYS_PER_YEAR
    roi = calculate_roi(total_profit, total_acquisition_cost)

    financials.status = PropertyStatus.SOLD
    financials.sale_date = sold_on
    financials.sale_price = sale_price
    financials.sale_expenses = sale_expenses
    financials.sale_breakdown = sale
    financials.net_sale_proceeds = net_sale_proceeds
    financials.capital_gain = capital_gain
    financials.total_profit = total_profit
    financials.roi = roi
    financials.annualized_roi = calculate_annualized_roi(roi, holding_period_years)
    financials.holding_period = holding_period
    financials.holding_period_years = holding_period_years
    return financials


# ============================================================================
# Portfolio level
# ============================================================================


def _category_total_between(
    repo: TransactionRepository,
    property_id: str,
    category: TransactionCategory,
    start: date,
    end: date,
) -> Decimal:
    return sum(
        (t.amount for t in repo.get_by_category(property_id, category) if start <= t.date <= end),
        ZERO,
    )


def calculate_portfolio_financials(
    repo: TransactionRepository,
    properties: Iterable[PortfolioProperty],
    today: date | None = None,
) -> PortfolioFinancials:
    """Calculate portfolio-wide totals, realized and unrealized profit.

    Income, expenses and YTD figures only count active properties. Realized
    profit comes from sold properties; unrealized profit marks every active
    property to its current value.
    """
    properties = list(properties)
    today = today or repo.clock().date()
    year_start = date(today.year, 1, 1)

    active = [p for p in properties if p.status == PropertyStatus.ACTIVE]
    sold = [p for p in properties if p.status == PropertyStatus.SOLD]

    total_invested = ZERO
    current_portfolio_value = ZERO
    total_income = ZERO
    total_expenses = ZERO
    income_ytd = ZERO
    expenses_ytd = ZERO
    total_realized_profit = ZERO
    total_holding_period = 0
    unrealized_profit = ZERO
    best_roi: PropertyHighlight | None = None
    best_cash_flow: PropertyHighlight | None = None

    for prop in properties:
        financials = calculate_property_financials(
            repo,
            prop.property_id,
            prop.address,
            prop.acquisition_date,
            prop.current_value,
            prop.sale_date if prop.status == PropertyStatus.SOLD else None,
        )
        total_invested += financials.total_acquisition_cost

        if prop.status == PropertyStatus.ACTIVE:
            current_portfolio_value += prop.current_value
            total_income += financials.total_income
            total_expenses += financials.total_expenses
            income_ytd += _category_total_between(
                repo, prop.property_id, TransactionCategory.INCOME, year_start, today
            )
            expenses_ytd += _category_total_between(
                repo, prop.property_id, TransactionCategory.EXPENSE, year_start, today
            )
            potential_gain = prop.current_value - financials.total_acquisition_cost
            unrealized_profit += potential_gain + financials.operating_profit

        if prop.status == PropertyStatus.SOLD and financials.total_profit:
            total_realized_profit += financials.total_profit
            if financials.holding_period:
                total_holding_period += financials.holding_period

        if financials.roi and (best_roi is None or financials.roi > best_roi.value):
            best_roi = PropertyHighlight(prop.property_id, prop.address, financials.roi)

        if best_cash_flow is None or financials.net_cash_flow > best_cash_flow.value:
            best_cash_flow = PropertyHighlight(
                prop.property_id, prop.address, financials.net_cash_flow
            )

    average_holding_period = (
        Decimal(total_holding_period) / Decimal(len(sold)) if sold else ZERO
    )

    logger.debug(
        "Portfolio of %d properties: invested=%s realized=%s unrealized=%s",
        len(properties),
        total_invested,
        total_realized_profit,
        unrealized_profit,
    )

    return PortfolioFinancials(
        total_properties=len(properties),
        active_properties=len(active),
        sold_properties=len(sold),
        total_invested=total_invested,
        current_portfolio_value=current_portfolio_value,
        total_income=total_income,
        total_expenses=total_expenses,
        net_cash_flow=total_income - total_expenses,
        income_ytd=income_ytd,
        expenses_ytd=expenses_ytd,
        net_cash_flow_ytd=income_ytd - expenses_ytd,
        total_realized_profit=total_realized_profit,
        total_realized_roi=calculate_roi(total_realized_profit, total_invested),
        average_holding_period=average_holding_period,
        unrealized_profit=unrealized_profit,
        portfolio_roi=calculate_roi(total_realized_profit + unrealized_profit, total_invested),
        calculated_at=repo.clock(),
        best_roi_property=best_roi,
        best_cash_flow_property=best_cash_flow,
    )


# ============================================================================
# Profit & loss statement
# ============================================================================


def generate_profit_loss(
    repo: TransactionRepository,
    property_id: str,
    property_address: str,
    acquisition_date: date | str,
    sale_date: date | str,
    generated_by: str,
) -> ProfitLossStatement:
    """Build the P&L statement of a sold property."""
    acquired_on = _as_date(acquisition_date)
    sold_on = _as_date(sale_date)
    totals = repo.totals_by_type(property_id)

    purchase_price = totals.get(T.PURCHASE_PRICE, ZERO)
    acquisition = _acquisition_breakdown(totals)
    total_acquisition_cost = purchase_price + acquisition.total

    total_income = repo.total_by_category(property_id, TransactionCategory.INCOME)
    total_expenses = repo.total_by_category(property_id, TransactionCategory.EXPENSE)
    operating_profit = total_income - total_expenses

    days = calculate_holding_period(acquired_on, sold_on)
    years = Decimal(days) / DAYS_PER_YEAR

    sale = _sale_breakdown(totals)
    sale_price = totals.get(T.SALE_PRICE, ZERO)
    net_sale_proceeds = sale_price - sale.total

    capital_gain = net_sale_proceeds - total_acquisition_cost
    total_profit = capital_gain + operating_profit
    total_roi = calculate_roi(total_profit, total_acquisition_cost)

    return ProfitLossStatement(
        property_id=property_id,
        property_address=property_address,
        acquisition_date=acquired_on,
        sale_date=sold_on,
        purchase_price=purchase_price,
        acquisition_breakdown=acquisition,
        total_acquisition_cost=total_acquisition_cost,
        operating_period=OperatingPeriod(start=acquired_on, end=sold_on, days=days, years=years),
        total_income=total_income,
        total_expenses=total_expenses,
        operating_profit=operating_profit,
        sale_price=sale_price,
        sale_expenses=sale.total,
        net_sale_proceeds=net_sale_proceeds,
        capital_gain=capital_gain,
        total_profit=total_profit,
        total_roi=total_roi,
        annualized_roi=calculate_annualized_roi(total_roi, years),
        profit_breakdown=ProfitBreakdown(
            from_capital_gain=capital_gain,
            from_operations=operating_profit,
            capital_gain_share=share_of(capital_gain, total_profit),
            operations_share=share_of(operating_profit, total_profit),
        ),
        generated_at=repo.clock(),
        generated_by=generated_by,
    )


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])
