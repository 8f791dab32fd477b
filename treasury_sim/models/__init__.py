"""Domain models for the treasury simulator."""

from treasury_sim.models.account import Account
from treasury_sim.models.enums import AccountType, Currency, TransferStatus
from treasury_sim.models.transfer import (
    TransactionFilter,
    TransactionRecord,
    TransferRejection,
    TransferRequest,
)

__all__ = [
    "Account",
    "AccountType",
    "Currency",
    "TransactionFilter",
    "TransactionRecord",
    "TransferRejection",
    "TransferRequest",
    "TransferStatus",
]
