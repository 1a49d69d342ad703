"""Plain-text rendering of profit and loss statements."""

from decimal import Decimal

from estate_ledger.models.financials import ProfitLossStatement

LABEL_WIDTH = 26


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _percent(value: Decimal | None) -> str:
    return "n/a" if value is None else f"{value:.2f}%"


def _line(label: str, value: str) -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{value}"


def format_profit_loss_report(statement: ProfitLossStatement, currency: str = "PKR") -> str:
    """Render a P&L statement as an aligned text report."""
    acq = statement.acquisition_breakdown
    period = statement.operating_period
    breakdown = statement.profit_breakdown

    lines = [
        "PROFIT & LOSS STATEMENT",
        f"Property: {statement.property_address}",
        f"Period: {period.start.isoformat()} to {period.end.isoformat()} ({period.days} days)",
        f"Currency: {currency}",
        "",
        "ACQUISITION COSTS",
        _line("Purchase Price", _money(statement.purchase_price)),
        _line("Registration Fee", _money(acq.registration_fee)),
        _line("Stamp Duty", _money(acq.stamp_duty)),
        _line("Legal Fees", _money(acq.legal_fees)),
        _line("Broker Commission", _money(acq.broker_commission)),
        _line("Renovation", _money(acq.renovation)),
        _line("Other", _money(acq.other)),
        _line("TOTAL ACQUISITION", _money(statement.total_acquisition_cost)),
        "",
        "OPERATIONS",
        _line("Total Income", _money(statement.total_income)),
        _line("Total Expenses", _money(statement.total_expenses)),
        _line("OPERATING PROFIT", _money(statement.operating_profit)),
        "",
        "SALE",
        _line("Sale Price", _money(statement.sale_price)),
        _line("Sale Expenses", _money(statement.sale_expenses)),
        _line("NET SALE PROCEEDS", _money(statement.net_sale_proceeds)),
        "",
        "PROFITABILITY",
        _line("Capital Gain", _money(statement.capital_gain)),
        _line("Operating Profit", _money(statement.operating_profit)),
        _line("TOTAL PROFIT", _money(statement.total_profit)),
        _line("From Capital Gain", _percent(breakdown.capital_gain_share)),
        _line("From Operations", _percent(breakdown.operations_share)),
        _line("ROI", _percent(statement.total_roi)),
        _line("Annualized ROI", _percent(statement.annualized_roi)),
        "",
        f"Generated: {statement.generated_at:%Y-%m-%d %H:%M} by {statement.generated_by}",
    ]
    return "\n".join(lines)
