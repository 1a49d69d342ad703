"""Custom exception hierarchy for estate-ledger."""


class EstateLedgerError(Exception):
    """Base exception for all estate-ledger errors."""


class EntityNotFoundError(EstateLedgerError):
    """Raised when a referenced entity does not exist."""


class TransactionNotFoundError(EntityNotFoundError):
    """Raised when a ledger transaction id is unknown."""


class TransactionValidationError(EstateLedgerError):
    """Raised when a transaction violates a ledger invariant."""


class StorageError(EstateLedgerError):
    """Raised when the backing store cannot persist a collection."""


class ConfigurationError(EstateLedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(EstateLedgerError):
    """Raised when an event sink operation fails."""
