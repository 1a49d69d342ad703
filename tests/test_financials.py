"""Tests for property, portfolio and P&L financials."""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import pytest

from estate_ledger.financials import (
    calculate_annualized_roi,
    calculate_holding_period,
    calculate_holding_period_years,
    calculate_portfolio_financials,
    calculate_property_financials,
    calculate_roi,
    format_profit_loss_report,
    generate_profit_loss,
    share_of,
)
from estate_ledger.ledger import TransactionRepository
from estate_ledger.models import PortfolioProperty, PropertyStatus
from estate_ledger.store import JsonFileStore

MakeRecord = Callable[..., dict[str, Any]]

ACQUIRED = date(2024, 1, 1)
SOLD = date(2025, 1, 1)


@pytest.fixture
def sold_property(
    repo: TransactionRepository, make_record: MakeRecord, sample_property_id: str
) -> str:
    """Property bought for 700,000 and sold for 1,000,000 with no operations."""
    repo.create_many(
        [
            make_record("purchase_price", "700000", date="2024-01-01"),
            make_record("sale_price", "1000000", date="2025-01-01"),
            make_record("sale_commission", "20000", date="2025-01-01"),
            make_record("closing_costs", "5000", date="2025-01-01"),
        ]
    )
    return sample_property_id


class TestRatioHelpers:
    """Tests for ROI and holding period helpers."""

    def test_roi(self) -> None:
        assert calculate_roi(Decimal("50"), Decimal("200")) == Decimal("25")

    def test_roi_without_investment_is_zero(self) -> None:
        assert calculate_roi(Decimal("50"), Decimal("0")) == Decimal("0")

    def test_annualized_roi(self) -> None:
        assert calculate_annualized_roi(Decimal("20"), Decimal("2")) == Decimal("10")

    def test_annualized_roi_empty_period(self) -> None:
        assert calculate_annualized_roi(Decimal("20"), Decimal("0")) == Decimal("20")

    def test_holding_period(self) -> None:
        assert calculate_holding_period(ACQUIRED, SOLD) == 366
        assert calculate_holding_period("2024-03-01", "2024-03-31") == 30
        assert calculate_holding_period_years(date(2023, 1, 1), date(2024, 1, 1)) == Decimal("1")

    def test_share_of(self) -> None:
        assert share_of(Decimal("25"), Decimal("100")) == Decimal("25")
        assert share_of(Decimal("25"), Decimal("0")) is None


class TestPropertyFinancials:
    """Tests for calculate_property_financials."""

    def test_net_cash_flow(
        self, repo: TransactionRepository, make_record: MakeRecord, sample_property_id: str
    ) -> None:
        """Income of 100 against expenses of 40 leaves 60."""
        repo.create_many([make_record("rental_income", "100"), make_record("maintenance", "40")])

        financials = calculate_property_financials(repo, sample_property_id, "12 Canal View", ACQUIRED)

        assert financials.total_income == Decimal("100")
        assert financials.total_expenses == Decimal("40")
        assert financials.net_cash_flow == Decimal("60")
        assert financials.operating_profit == Decimal("60")
        assert financials.income_breakdown.rental_income == Decimal("100")
        assert financials.expense_breakdown.maintenance == Decimal("40")

    def test_active_property_has_no_sale_fields(
        self, repo: TransactionRepository, make_record: MakeRecord, sample_property_id: str
    ) -> None:
        repo.create_many(
            [
                make_record("purchase_price", "500000", date="2024-01-01"),
                make_record("stamp_duty", "15000", date="2024-01-01"),
                make_record("renovation", "35000", date="2024-02-01"),
            ]
        )

        financials = calculate_property_financials(
            repo, sample_property_id, "12 Canal View", ACQUIRED, current_value=Decimal("650000")
        )

        assert financials.status == PropertyStatus.ACTIVE
        assert financials.purchase_price == Decimal("500000")
        assert financials.acquisition_expenses == Decimal("50000")
        assert financials.total_acquisition_cost == Decimal("550000")
        assert financials.current_value == Decimal("650000")
        assert financials.transaction_count == 3
        assert financials.sale_price is None
        assert financials.roi is None
        assert financials.holding_period is None

    def test_sold_property(self, repo: TransactionRepository, sold_property: str) -> None:
        financials = calculate_property_financials(
            repo, sold_property, "12 Canal View", ACQUIRED, sale_date=SOLD
        )

        assert financials.status == PropertyStatus.SOLD
        assert financials.sale_expenses == Decimal("25000")
        assert financials.net_sale_proceeds == Decimal("975000")
        assert financials.capital_gain == Decimal("275000")
        assert financials.total_profit == Decimal("275000")
        assert round(financials.roi, 2) == Decimal("39.29")
        assert financials.holding_period == 366
        assert financials.annualized_roi < financials.roi

    def test_sold_without_acquisition_cost(
        self, repo: TransactionRepository, make_record: MakeRecord, sample_property_id: str
    ) -> None:
        repo.create(make_record("sale_price", "1000"))

        financials = calculate_property_financials(
            repo, sample_property_id, "12 Canal View", ACQUIRED, sale_date="2025-03-15"
        )

        assert financials.total_profit == Decimal("1000")
        assert financials.roi == Decimal("0")
        assert financials.annualized_roi == Decimal("0")

    def test_unknown_property_is_all_zero(self, repo: TransactionRepository) -> None:
        financials = calculate_property_financials(repo, "prop-none", "", ACQUIRED)

        assert financials.transaction_count == 0
        assert financials.total_acquisition_cost == Decimal("0")
        assert financials.net_cash_flow == Decimal("0")

    def test_reflects_ledger_changes(
        self, repo: TransactionRepository, make_record: MakeRecord, sample_property_id: str
    ) -> None:
        txn = repo.create(make_record("rental_income", "100"))
        assert calculate_property_financials(repo, sample_property_id, "", ACQUIRED).total_income == Decimal("100")

        repo.update(txn.transaction_id, amount="250")

        assert calculate_property_financials(repo, sample_property_id, "", ACQUIRED).total_income == Decimal("250")

    def test_consistent_across_repositories_on_one_file_store(
        self, tmp_path: Path, make_record: MakeRecord, now: datetime, sample_property_id: str
    ) -> None:
        """Transaction count and totals agree when another writer shares the file."""
        store = JsonFileStore(tmp_path)
        reader = TransactionRepository(store, clock=lambda: now)
        writer = TransactionRepository(store, clock=lambda: now)

        reader.create(make_record("rental_income", "100"))
        assert calculate_property_financials(reader, sample_property_id, "", ACQUIRED).total_income == Decimal("100")

        writer.create(make_record("rental_income", "100"))
        financials = calculate_property_financials(reader, sample_property_id, "", ACQUIRED)

        assert financials.transaction_count == 2
        assert financials.total_income == Decimal("200")


class TestPortfolioFinancials:
    """Tests for calculate_portfolio_financials."""

    @pytest.fixture
    def portfolio(
        self, repo: TransactionRepository, make_record: MakeRecord, sold_property: str
    ) -> list[PortfolioProperty]:
        repo.create_many(
            [
                make_record("purchase_price", "1000", property_id="prop-active", date="2024-06-01"),
                make_record("rental_income", "100", property_id="prop-active", date="2024-12-01"),
                make_record("rental_income", "100", property_id="prop-active", date="2025-03-15"),
                make_record("utilities", "50", property_id="prop-active", date="2025-02-01"),
            ]
        )
        return [
            PortfolioProperty("prop-active", "1 Active Rd", date(2024, 6, 1), Decimal("1500")),
            PortfolioProperty(
                sold_property,
                "12 Canal View",
                ACQUIRED,
                Decimal("0"),
                status=PropertyStatus.SOLD,
                sale_date=SOLD,
            ),
        ]

    def test_counts_and_totals(
        self, repo: TransactionRepository, portfolio: list[PortfolioProperty]
    ) -> None:
        result = calculate_portfolio_financials(repo, portfolio)

        assert result.total_properties == 2
        assert result.active_properties == 1
        assert result.sold_properties == 1
        assert result.total_invested == Decimal("701000")
        assert result.current_portfolio_value == Decimal("1500")
        assert result.total_income == Decimal("200")
        assert result.total_expenses == Decimal("50")
        assert result.net_cash_flow == Decimal("150")

    def test_year_to_date(self, repo: TransactionRepository, portfolio: list[PortfolioProperty]) -> None:
        result = calculate_portfolio_financials(repo, portfolio, today=date(2025, 6, 30))

        assert result.income_ytd == Decimal("100")
        assert result.expenses_ytd == Decimal("50")
        assert result.net_cash_flow_ytd == Decimal("50")

    def test_realized_and_unrealized(
        self, repo: TransactionRepository, portfolio: list[PortfolioProperty]
    ) -> None:
        result = calculate_portfolio_financials(repo, portfolio)

        assert result.total_realized_profit == Decimal("275000")
        assert result.average_holding_period == Decimal("366")
        # Current value 1500 over cost 1000, plus 150 operating profit
        assert result.unrealized_profit == Decimal("650")
        assert result.total_realized_roi == calculate_roi(Decimal("275000"), Decimal("701000"))
        assert result.portfolio_roi == calculate_roi(Decimal("275650"), Decimal("701000"))

    def test_highlights(self, repo: TransactionRepository, portfolio: list[PortfolioProperty]) -> None:
        result = calculate_portfolio_financials(repo, portfolio)

        assert result.best_roi_property.property_id == portfolio[1].property_id
        assert result.best_cash_flow_property.property_id == "prop-active"
        assert result.best_cash_flow_property.value == Decimal("150")

    def test_empty_portfolio(self, repo: TransactionRepository) -> None:
        result = calculate_portfolio_financials(repo, [])

        assert result.total_properties == 0
        assert result.total_realized_roi == Decimal("0")
        assert result.average_holding_period == Decimal("0")
        assert result.best_roi_property is None
        assert result.best_cash_flow_property is None


class TestProfitLoss:
    """Tests for P&L statements and their text report."""

    def test_statement(self, repo: TransactionRepository, sold_property: str) -> None:
        statement = generate_profit_loss(
            repo, sold_property, "12 Canal View", ACQUIRED, SOLD, generated_by="agent-001"
        )

        assert statement.total_acquisition_cost == Decimal("700000")
        assert statement.net_sale_proceeds == Decimal("975000")
        assert statement.capital_gain == Decimal("275000")
        assert statement.operating_period.days == 366
        assert round(statement.total_roi, 2) == Decimal("39.29")
        assert statement.profit_breakdown.capital_gain_share == Decimal("100")
        assert statement.profit_breakdown.operations_share == Decimal("0")
        assert statement.generated_by == "agent-001"

    def test_zero_profit_has_no_split(
        self, repo: TransactionRepository, make_record: MakeRecord, sample_property_id: str
    ) -> None:
        repo.create_many(
            [
                make_record("purchase_price", "500", date="2024-01-01"),
                make_record("sale_price", "500", date="2025-01-01"),
            ]
        )

        statement = generate_profit_loss(repo, sample_property_id, "x", ACQUIRED, SOLD, "agent-001")

        assert statement.total_profit == Decimal("0")
        assert statement.profit_breakdown.capital_gain_share is None
        assert statement.profit_breakdown.operations_share is None
        assert "n/a" in format_profit_loss_report(statement)

    def test_report_text(self, repo: TransactionRepository, sold_property: str) -> None:
        statement = generate_profit_loss(
            repo, sold_property, "12 Canal View", ACQUIRED, SOLD, generated_by="agent-001"
        )

        report = format_profit_loss_report(statement, currency="USD")

        assert report.startswith("PROFIT & LOSS STATEMENT")
        assert "Property: 12 Canal View" in report
        assert "Currency: USD" in report
        assert "975,000.00" in report
        assert "39.29%" in report
        assert "Period: 2024-01-01 to 2025-01-01 (366 days)" in report
        assert "by agent-001" in report
