"""Derived financial metrics over the transaction ledger."""

from estate_ledger.financials.aggregator import (
    calculate_annualized_roi,
    calculate_holding_period,
    calculate_holding_period_years,
    calculate_portfolio_financials,
    calculate_property_financials,
    calculate_roi,
    generate_profit_loss,
    share_of,
)
from estate_ledger.financials.report import format_profit_loss_report

__all__ = [
    "calculate_annualized_roi",
    "calculate_holding_period",
    "calculate_holding_period_years",
    "calculate_portfolio_financials",
    "calculate_property_financials",
    "calculate_roi",
    "format_profit_loss_report",
    "generate_profit_loss",
    "share_of",
]
