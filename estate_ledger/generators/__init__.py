"""Seeded sample data generators."""

from estate_ledger.generators.listing import ListingGenerator
from estate_ledger.generators.transaction import TransactionGenerator

__all__ = ["ListingGenerator", "TransactionGenerator"]
