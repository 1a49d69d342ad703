"""Pytest configuration and fixtures."""

from datetime import datetime
from typing import Any, Callable

import pytest

from estate_ledger.ledger import TransactionRepository
from estate_ledger.store import InMemoryStore

FIXED_NOW = datetime(2025, 6, 30, 12, 0, 0)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    """Frozen current time used by repositories under test."""
    return FIXED_NOW


@pytest.fixture
def store() -> InMemoryStore:
    """Create a fresh in-memory store for each test."""
    return InMemoryStore()


@pytest.fixture
def repo(store: InMemoryStore, now: datetime) -> TransactionRepository:
    """Ledger over the in-memory store with a frozen clock."""
    return TransactionRepository(store, clock=lambda: now)


@pytest.fixture
def sample_property_id() -> str:
    """Sample property ID."""
    return "prop-test-001"


@pytest.fixture
def make_record(sample_property_id: str) -> Callable[..., dict[str, Any]]:
    """Build a valid transaction input record, overridable per field."""

    def _make(transaction_type: str = "rental_income", amount: Any = "100", **overrides: Any) -> dict[str, Any]:
        record: dict[str, Any] = {
            "property_id": sample_property_id,
            "property_address": "12 Canal View, Lahore",
            "transaction_type": transaction_type,
            "amount": amount,
            "date": "2025-03-15",
            "description": f"Test {transaction_type}",
            "recorded_by": "agent-001",
            "recorded_by_name": "Test Agent",
        }
        record.update(overrides)
        return record

    return _make
