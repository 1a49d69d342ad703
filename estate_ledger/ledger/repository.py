"""Transaction ledger for agency-owned properties."""

from __future__ import annotations

import logging
import uuid
from dataclasses import fields, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

from estate_ledger.exceptions import (
    SinkError,
    TransactionNotFoundError,
    TransactionValidationError,
)
from estate_ledger.ledger.categories import types_for_category
from estate_ledger.ledger.validation import (
    resolve_category,
    validate_amount,
    validate_date,
    validate_required,
)
from estate_ledger.models.base import Event
from estate_ledger.models.enums import PaymentMethod, TransactionCategory, TransactionType
from estate_ledger.models.transaction import Transaction
from estate_ledger.store.base import KeyValueStore
from estate_ledger.store.serialization import transaction_from_dict, transaction_to_dict

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "agency_transactions"
EVENT_SOURCE = "estate-ledger"

# Assigned by the ledger, never supplied by callers
_SYSTEM_FIELDS = frozenset({"transaction_id", "category", "created_at", "updated_at"})
_IMMUTABLE_FIELDS = frozenset({"transaction_id", "property_id", "created_at", "updated_at"})
_INPUT_FIELDS = frozenset(f.name for f in fields(Transaction)) - _SYSTEM_FIELDS | {"category"}

ZERO = Decimal("0")


def generate_transaction_id() -> str:
    return f"txn_{uuid.uuid4().hex}"


class TransactionRepository:
    """Append-mostly ledger of property transactions.

    Every call reads the collection from the injected store, so the
    repository holds no record state of its own and several repositories
    (or processes) may share one collection.

    Parameters
    ----------
    store : KeyValueStore
        Backing store for the collection.
    collection : str
        Key the transactions are stored under.
    clock : Callable[[], datetime] | None
        Source of the current time, used for timestamps and to reject
        future-dated transactions.
    event_sink : Any | None
        Sink with a ``write_batch(topic, records)`` method receiving one
        :class:`Event` per created, updated or deleted transaction.
    topic : str
        Topic passed to the event sink.
    """

    def __init__(
        self,
        store: KeyValueStore,
        collection: str = DEFAULT_COLLECTION,
        clock: Callable[[], datetime] | None = None,
        event_sink: Any | None = None,
        topic: str = "estate.agency-transactions",
    ) -> None:
        self.store = store
        self.collection = collection
        self.clock = clock or datetime.now
        self.event_sink = event_sink
        self.topic = topic

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> list[Transaction]:
        transactions = []
        for record in self.store.read(self.collection):
            try:
                transactions.append(transaction_from_dict(record))
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.error(
                    "Skipping unreadable transaction record %s: %s",
                    record.get("transaction_id") if isinstance(record, dict) else record,
                    e,
                )
        return transactions

    def _save(self, transactions: list[Transaction]) -> None:
        self.store.write(self.collection, [transaction_to_dict(t) for t in transactions])

    def _publish(self, action: str, transactions: list[Transaction]) -> None:
        if self.event_sink is None or not transactions:
            return

        now = self.clock()
        events = [
            Event(
                event_id=str(uuid.uuid4()),
                event_type=f"agency_transaction.{action}",
                event_time=now,
                source=EVENT_SOURCE,
                subject=t.transaction_id,
                data=transaction_to_dict(t),
            )
            for t in transactions
        ]
        try:
            self.event_sink.write_batch(self.topic, events)
        except SinkError:
            # The ledger write already succeeded; a lost notification must not undo it.
            logger.exception("Failed to publish %d %s event(s)", len(events), action)

    # ------------------------------------------------------------------
    # Record construction
    # ------------------------------------------------------------------

    def _build(self, data: Mapping[str, Any], now: datetime) -> Transaction:
        unknown = set(data) - _INPUT_FIELDS
        if unknown:
            raise TransactionValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        validate_required(data)
        if "amount" not in data:
            raise TransactionValidationError("Missing required fields: amount")
        if "date" not in data:
            raise TransactionValidationError("Missing required fields: date")

        txn_type, category = resolve_category(data.get("transaction_type"), data.get("category"))
        values = {k: v for k, v in data.items() if k != "category"}
        values.update(
            transaction_id=generate_transaction_id(),
            transaction_type=txn_type,
            category=category,
            amount=validate_amount(data["amount"]),
            date=validate_date(data["date"], now.date()),
            payment_method=_payment_method(data.get("payment_method")),
            property_address=data.get("property_address") or "",
            created_at=now,
            updated_at=now,
        )
        return Transaction(**values)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, data: Mapping[str, Any] | None = None, **kwargs: Any) -> Transaction:
        """Validate and append a single transaction.

        Fields may be passed as a mapping, as keyword arguments, or both.

        Raises
        ------
        TransactionValidationError
            If the record violates a ledger invariant.
        StorageError
            If the collection cannot be written.
        """
        fields_ = {**(data or {}), **kwargs}
        transaction = self._build(fields_, self.clock())

        transactions = self._load()
        transactions.append(transaction)
        self._save(transactions)

        logger.info(
            "Recorded %s of %s for property %s",
            transaction.transaction_type.value,
            transaction.amount,
            transaction.property_id,
            extra={"property_id": transaction.property_id, "transaction_id": transaction.transaction_id},
        )
        self._publish("created", [transaction])
        return transaction

    def create_many(self, records: Iterable[Mapping[str, Any]]) -> list[Transaction]:
        """Validate and append several transactions with a single write.

        Every record is validated before anything is written, so either all
        records are persisted or none are.
        """
        now = self.clock()
        new_transactions = [self._build(record, now) for record in records]
        if not new_transactions:
            return []

        transactions = self._load()
        transactions.extend(new_transactions)
        self._save(transactions)

        logger.info("Recorded %d transactions in bulk", len(new_transactions))
        self._publish("created", new_transactions)
        return new_transactions

    def update(self, transaction_id: str, **changes: Any) -> Transaction:
        """Merge ``changes`` into an existing transaction.

        Raises
        ------
        TransactionNotFoundError
            If no transaction has ``transaction_id``.
        TransactionValidationError
            If a change targets an immutable or unknown field, or breaks an
            invariant.
        """
        immutable = set(changes) & _IMMUTABLE_FIELDS
        if immutable:
            raise TransactionValidationError(
                f"Cannot update immutable fields: {', '.join(sorted(immutable))}"
            )
        unknown = set(changes) - _INPUT_FIELDS
        if unknown:
            raise TransactionValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        transactions = self._load()
        index = next(
            (i for i, t in enumerate(transactions) if t.transaction_id == transaction_id),
            None,
        )
        if index is None:
            raise TransactionNotFoundError(f"Transaction with ID {transaction_id} not found")

        current = transactions[index]
        now = self.clock()
        values = dict(changes)

        merged_required = {
            name: values.get(name, getattr(current, name))
            for name in ("property_id", "description", "recorded_by")
        }
        validate_required(merged_required)

        txn_type, category = resolve_category(
            values.get("transaction_type", current.transaction_type),
            values.get("category"),
        )
        values["transaction_type"] = txn_type
        values["category"] = category
        if "amount" in values:
            values["amount"] = validate_amount(values["amount"])
        if "date" in values:
            values["date"] = validate_date(values["date"], now.date())
        if "payment_method" in values:
            values["payment_method"] = _payment_method(values["payment_method"])

        updated = replace(current, **values, updated_at=now)
        transactions[index] = updated
        self._save(transactions)

        logger.debug(
            "Updated transaction %s",
            transaction_id,
            extra={"property_id": updated.property_id, "transaction_id": transaction_id},
        )
        self._publish("updated", [updated])
        return updated

    def delete(self, transaction_id: str) -> bool:
        """Remove a transaction. Returns ``False`` if it did not exist."""
        transactions = self._load()
        removed = [t for t in transactions if t.transaction_id == transaction_id]
        if not removed:
            return False

        self._save([t for t in transactions if t.transaction_id != transaction_id])
        self._publish("deleted", removed)
        return True

    def delete_by_property(self, property_id: str) -> int:
        """Remove every transaction of a property and return how many went."""
        transactions = self._load()
        kept = [t for t in transactions if t.property_id != property_id]
        removed = [t for t in transactions if t.property_id == property_id]

        if removed:
            self._save(kept)
            logger.info(
                "Deleted %d transactions for property %s",
                len(removed),
                property_id,
                extra={"property_id": property_id},
            )
            self._publish("deleted", removed)
        return len(removed)

    # ------------------------------------------------------------------
    # Queries (all sorted by date, newest first)
    # ------------------------------------------------------------------

    @staticmethod
    def _newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
        return sorted(transactions, key=lambda t: t.date, reverse=True)

    def get(self, transaction_id: str) -> Transaction | None:
        return next((t for t in self._load() if t.transaction_id == transaction_id), None)

    def get_all(self) -> list[Transaction]:
        return self._newest_first(self._load())

    def get_by_property(self, property_id: str) -> list[Transaction]:
        return self._newest_first(t for t in self._load() if t.property_id == property_id)

    def get_by_properties(self, property_ids: Iterable[str]) -> list[Transaction]:
        wanted = set(property_ids)
        return self._newest_first(t for t in self._load() if t.property_id in wanted)

    def get_by_category(
        self, property_id: str, category: TransactionCategory | str
    ) -> list[Transaction]:
        category = _category(category)
        return [t for t in self.get_by_property(property_id) if t.category == category]

    def get_by_type(self, property_id: str, txn_type: TransactionType | str) -> list[Transaction]:
        txn_type = _transaction_type(txn_type)
        return [t for t in self.get_by_property(property_id) if t.transaction_type == txn_type]

    def get_by_date_range(
        self, property_id: str, start: date | str, end: date | str
    ) -> list[Transaction]:
        """Transactions dated within ``[start, end]``, both ends inclusive."""
        start_date = _as_date(start)
        end_date = _as_date(end)
        return [t for t in self.get_by_property(property_id) if start_date <= t.date <= end_date]

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def count(self, property_id: str) -> int:
        return len(self.get_by_property(property_id))

    def count_by_category(self, property_id: str, category: TransactionCategory | str) -> int:
        return len(self.get_by_category(property_id, category))

    def has_transactions(self, property_id: str) -> bool:
        return self.count(property_id) > 0

    def latest(self, property_id: str) -> Transaction | None:
        transactions = self.get_by_property(property_id)
        return transactions[0] if transactions else None

    def totals_by_type(self, property_id: str) -> dict[TransactionType, Decimal]:
        """Per-type totals for a property, summed from the current collection."""
        totals: dict[TransactionType, Decimal] = {}
        for t in self._load():
            if t.property_id == property_id:
                totals[t.transaction_type] = totals.get(t.transaction_type, ZERO) + t.amount
        return totals

    def total_by_type(self, property_id: str, txn_type: TransactionType | str) -> Decimal:
        return self.totals_by_type(property_id).get(_transaction_type(txn_type), ZERO)

    def total_by_category(self, property_id: str, category: TransactionCategory | str) -> Decimal:
        totals = self.totals_by_type(property_id)
        return sum((totals.get(t, ZERO) for t in types_for_category(_category(category))), ZERO)


def _category(value: Any) -> TransactionCategory:
    try:
        return TransactionCategory(value)
    except ValueError:
        raise TransactionValidationError(f"Unknown category: {value!r}") from None


def _transaction_type(value: Any) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise TransactionValidationError(f"Unknown transaction type: {value!r}") from None


def _payment_method(value: Any) -> PaymentMethod | None:
    if value is None or value == "":
        return None
    try:
        return PaymentMethod(value)
    except ValueError:
        raise TransactionValidationError(f"Unknown payment method: {value!r}") from None


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])
