"""Custom exception hierarchy for treasury-sim."""


class TreasuryError(Exception):
    """Base exception for all treasury-sim errors."""


class EntityNotFoundError(TreasuryError):
    """Raised when a referenced entity does not exist."""


class AccountNotFoundError(EntityNotFoundError):
    """Raised when an account id does not match any account."""


class TransactionNotFoundError(EntityNotFoundError):
    """Raised when a transaction id is not in the ledger."""


class InvalidEntityStateError(TreasuryError):
    """Raised when an entity is in an invalid state for the operation."""


class InsufficientFundsError(InvalidEntityStateError):
    """Raised when a debit would take an account balance below zero."""


class DuplicateAccountError(InvalidEntityStateError):
    """Raised when an account id is registered twice."""


class DuplicateTransactionError(InvalidEntityStateError):
    """Raised when a transaction id is appended to the ledger twice."""


class FXRateNotFoundError(TreasuryError):
    """Raised in strict mode when no FX rate resolves for a currency pair."""


class ConfigurationError(TreasuryError):
    """Raised when configuration is invalid or missing."""


class SnapshotError(TreasuryError):
    """Raised when a persisted snapshot cannot be read or written."""


class SinkError(TreasuryError):
    """Raised when a sink operation fails."""
