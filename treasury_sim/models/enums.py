"""Enumeration types for treasury entities."""

from enum import Enum


class Currency(str, Enum):
    KES = "KES"
    USD = "USD"
    NGN = "NGN"


class AccountType(str, Enum):
    MOBILE_MONEY = "Mobile Money"
    BANK_ACCOUNT = "Bank Account"


class TransferStatus(str, Enum):
    COMPLETED = "Completed"
    SCHEDULED = "Scheduled"
