#!/usr/bin/env python3
"""Generate a sample ledger and listing snapshot, then print a portfolio summary.

Writes ``agency_transactions.json`` and ``listings.json`` into the output
directory using the JSON file store, so the files can be inspected or reused
as fixtures.
"""

import argparse
import logging
import sys
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

from estate_ledger.analytics import market_statistics, market_trend_direction, price_distribution
from estate_ledger.config import EstateLedgerConfig, build_event_sink
from estate_ledger.exceptions import EstateLedgerError
from estate_ledger.financials import (
    calculate_portfolio_financials,
    format_profit_loss_report,
    generate_profit_loss,
)
from estate_ledger.generators import ListingGenerator, TransactionGenerator
from estate_ledger.ledger import TransactionRepository
from estate_ledger.logging import setup_logging
from estate_ledger.models import PortfolioProperty, PropertyStatus
from estate_ledger.store import JsonFileStore
from estate_ledger.store.serialization import listing_to_dict

logger = logging.getLogger(__name__)


def seed_portfolio(
    repo: TransactionRepository,
    generator: TransactionGenerator,
    num_properties: int,
    today: date,
) -> list[PortfolioProperty]:
    """Record acquisition-to-date histories for ``num_properties`` properties."""
    properties = []
    for i in range(num_properties):
        property_id = f"prop-{i + 1:03d}"
        address = generator.address(generator.rng.choice(["Karachi", "Lahore", "Islamabad"]))
        purchase_price = Decimal(generator.rng.randint(8, 90)) * Decimal("1000000")
        acquired = today - timedelta(days=generator.rng.randint(200, 1500))
        sold = generator.rng.random() < 0.4
        sale_date = acquired + timedelta(days=generator.rng.randint(150, (today - acquired).days)) if sold else None

        records = generator.generate_history(
            property_id, address, purchase_price, acquired, today, sale_date=sale_date
        )
        repo.create_many(records)

        growth = Decimal(str(generator.rng.uniform(0.95, 1.35)))
        properties.append(
            PortfolioProperty(
                property_id=property_id,
                address=address,
                acquisition_date=acquired,
                current_value=(purchase_price * growth).quantize(Decimal("1")),
                status=PropertyStatus.SOLD if sold else PropertyStatus.ACTIVE,
                sale_date=sale_date,
            )
        )
    return properties


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample estate ledger")
    parser.add_argument("--properties", type=int, default=10, help="Agency-owned properties (default: 10)")
    parser.add_argument("--listings", type=int, default=200, help="Market listings (default: 200)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--output", type=Path, default=Path("local"), help="Output directory (default: local/)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON files")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    args = parser.parse_args()

    setup_logging(args.log_level)
    config = EstateLedgerConfig.from_env()

    store = JsonFileStore(args.output, pretty=args.pretty)
    # Start from an empty ledger so repeated runs do not accumulate records
    store.write(config.storage.transactions_key, [])

    repo = TransactionRepository(
        store,
        collection=config.storage.transactions_key,
        event_sink=build_event_sink(config),
        topic=config.events.transactions_topic,
    )
    today = date.today()

    try:
        properties = seed_portfolio(repo, TransactionGenerator(seed=args.seed), args.properties, today)

        listing_gen = ListingGenerator(seed=args.seed)
        listings = list(listing_gen.generate_batch(args.listings, now=datetime.now()))
        store.write(config.storage.listings_key, [listing_to_dict(l) for l in listings])
    except EstateLedgerError as e:
        logger.error("Sample generation failed: %s", e)
        sys.exit(1)

    logger.info("Wrote %d transactions and %d listings to %s", len(repo.get_all()), len(listings), args.output)

    portfolio = calculate_portfolio_financials(repo, properties, today=today)
    print("\nPORTFOLIO")
    print(f"  Properties:        {portfolio.total_properties} ({portfolio.sold_properties} sold)")
    print(f"  Invested:          {portfolio.total_invested:,.0f} {config.currency}")
    print(f"  Net cash flow:     {portfolio.net_cash_flow:,.0f} {config.currency}")
    print(f"  Realized profit:   {portfolio.total_realized_profit:,.0f} {config.currency}")
    print(f"  Unrealized profit: {portfolio.unrealized_profit:,.0f} {config.currency}")
    print(f"  Portfolio ROI:     {portfolio.portfolio_roi:.2f}%")

    first_sold = next((p for p in properties if p.status == PropertyStatus.SOLD), None)
    if first_sold is not None:
        statement = generate_profit_loss(
            repo,
            first_sold.property_id,
            first_sold.address,
            first_sold.acquisition_date,
            first_sold.sale_date,
            generated_by="generate_sample_data",
        )
        print()
        print(format_profit_loss_report(statement, currency=config.currency))

    stats = market_statistics(listings)
    direction = market_trend_direction(listings)
    print("\nMARKET")
    print(f"  Listings:          {stats.total_listings} ({stats.sold_listings} sold)")
    print(f"  Average price:     {stats.average_price:,} {config.currency}")
    print(f"  Days to sell:      {stats.market_velocity.average_days_to_sell}")
    print(f"  Trend:             {direction.trend.value} ({direction.change_percentage:+.2f}%, {direction.strength.value})")
    for bucket in price_distribution(listings):
        print(f"  {bucket.range:<12} {bucket.count:>5} ({bucket.percentage:.2f}%)")


if __name__ == "__main__":
    main()
