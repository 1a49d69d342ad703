"""Generate a property's ledger history as transaction input records."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from estate_ledger.generators.base import BaseGenerator
from estate_ledger.models.enums import PaymentMethod, TransactionType

# Acquisition fees as a share of purchase price
ACQUISITION_FEES = {
    TransactionType.REGISTRATION_FEE: Decimal("0.01"),
    TransactionType.STAMP_DUTY: Decimal("0.03"),
    TransactionType.LEGAL_FEES: Decimal("0.005"),
    TransactionType.BROKER_COMMISSION: Decimal("0.01"),
}

MONTHLY_EXPENSES = (
    TransactionType.MAINTENANCE,
    TransactionType.UTILITIES,
    TransactionType.MANAGEMENT_FEE,
)


def _money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"))


class TransactionGenerator(BaseGenerator):
    """Generate acquisition, rental, expense and sale records for a property."""

    def _record(
        self,
        property_id: str,
        address: str,
        txn_type: TransactionType,
        amount: Decimal,
        on: date,
        recorded_by: str,
    ) -> dict[str, Any]:
        return {
            "property_id": property_id,
            "property_address": address,
            "transaction_type": txn_type,
            "amount": _money(amount),
            "date": on,
            "description": f"{txn_type.value.replace('_', ' ').capitalize()} - {address}",
            "payment_method": self.rng.choice(list(PaymentMethod)),
            "receipt_number": f"RCP-{self.rng.randint(100000, 999999)}",
            "recorded_by": recorded_by,
            "recorded_by_name": self.fake.name(),
        }

    def generate_history(
        self,
        property_id: str,
        address: str,
        purchase_price: Decimal,
        acquisition_date: date,
        today: date,
        sale_date: date | None = None,
        recorded_by: str = "agent-001",
    ) -> list[dict[str, Any]]:
        """Build the records a property would accumulate until ``today``.

        Monthly rent is roughly 0.4% of the purchase price. When
        ``sale_date`` is given the property is sold at a 0-40% premium.
        """
        end = min(sale_date or today, today)
        records = [
            self._record(
                property_id, address, TransactionType.PURCHASE_PRICE,
                purchase_price, acquisition_date, recorded_by,
            )
        ]
        for txn_type, rate in ACQUISITION_FEES.items():
            records.append(
                self._record(
                    property_id, address, txn_type,
                    purchase_price * rate, acquisition_date, recorded_by,
                )
            )

        monthly_rent = purchase_price * Decimal("0.004")
        month = acquisition_date + timedelta(days=30)
        while month <= end:
            records.append(
                self._record(
                    property_id, address, TransactionType.RENTAL_INCOME,
                    monthly_rent, month, recorded_by,
                )
            )
            expense_type = self.rng.choice(MONTHLY_EXPENSES)
            share = Decimal(str(self.rng.uniform(0.05, 0.25)))
            records.append(
                self._record(
                    property_id, address, expense_type,
                    monthly_rent * share, month, recorded_by,
                )
            )
            month += timedelta(days=30)

        if sale_date is not None and sale_date <= today:
            premium = Decimal(str(self.rng.uniform(1.0, 1.4)))
            sale_price = purchase_price * premium
            records.extend(
                [
                    self._record(
                        property_id, address, TransactionType.SALE_PRICE,
                        sale_price, sale_date, recorded_by,
                    ),
                    self._record(
                        property_id, address, TransactionType.SALE_COMMISSION,
                        sale_price * Decimal("0.02"), sale_date, recorded_by,
                    ),
                    self._record(
                        property_id, address, TransactionType.CLOSING_COSTS,
                        sale_price * Decimal("0.005"), sale_date, recorded_by,
                    ),
                ]
            )
        return records

    def address(self, city: str) -> str:
        return f"{self.fake.building_number()} {self.fake.street_name()}, {city}"
